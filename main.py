import sys

from alert_gateway.server import main


if __name__ == '__main__':
    sys.exit(main())
