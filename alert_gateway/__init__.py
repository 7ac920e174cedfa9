"""Gateway que recebe webhooks do Alertmanager e repassa para o Synology Chat.

Este pacote contém:
- constants: variáveis de ambiente e limites fixos
- config: carregamento da configuração (env + YAML opcional)
- logger: configuração dos handlers de log (stdout/stderr)
- errors: hierarquia de exceções
- models: modelo do payload do Alertmanager
- formatters: formatação da mensagem de texto
- services: envio para o Incoming Webhook do Synology Chat
- utils: helpers diversos
- controller: criação do Flask app e endpoints
- server: inicialização do processo
"""
