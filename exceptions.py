class ErroCardapio(Exception):
    """Classe base para os erros do cardápio."""
    pass

class ErroValidacao(ErroCardapio):
    """Dados informados pelo usuário são inválidos; nada foi alterado."""
    def __init__(self, message="Os dados informados são inválidos."):
        self.message = message
        super().__init__(self.message)

class ErroArmazenamento(ErroCardapio):
    """Falha ao ler ou gravar no armazenamento local."""
    def __init__(self, message="Não foi possível acessar o armazenamento."):
        self.message = message
        super().__init__(self.message)

class DocumentoCorrompido(ErroArmazenamento):
    """O documento gravado em uma chave não pôde ser interpretado."""
    def __init__(self, chave: str, message=None):
        self.chave = chave
        if message is None:
            message = f"Documento corrompido na chave '{chave}'."
        super().__init__(message)
