# cadastro_contatos/exceptions.py

from typing import Dict, List


class ErroCadastro(Exception):
    """Base de todos os erros de domínio do cadastro."""


class ErroValidacao(ErroCadastro):
    def __init__(self, erros: Dict[str, List[str]]):
        super().__init__("Um ou mais erros de validação ocorreram.")
        self.erros = erros


class ErroCriacaoUsuario(ErroCadastro):
    """O armazenamento de identidades recusou a criação (email duplicado, senha fraca)."""

    def __init__(self, erros: List[dict]):
        super().__init__("; ".join(e["description"] for e in erros))
        self.erros = erros


class NaoEncontrado(ErroCadastro):
    pass


class NaoAutenticado(ErroCadastro):
    pass


class Proibido(ErroCadastro):
    pass


class UsuarioBloqueado(ErroCadastro):
    pass


class CredenciaisInvalidas(ErroCadastro):
    pass


class FalhaPersistencia(ErroCadastro):
    pass


class ErroAssinatura(ErroCadastro):
    """Chave de assinatura ausente ou inválida: erro de configuração do serviço."""
