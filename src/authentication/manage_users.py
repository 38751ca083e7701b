# src/authentication/manage_users.py

import argparse
import sys
import uuid

from authentication.domain.entities import Usuario
from authentication.domain.validacao import validar_registro, verificar_politica_senha
from authentication.infrastructure.auth_repository import PostgresUsuarioRepository, UsuarioRepository
from authentication.utils.password_utils import gerar_hash_senha
from cadastro_contatos.config import Settings, carregar_settings
from cadastro_contatos.exceptions import ErroCadastro
from cadastro_contatos.infrastructure.database_connection import criar_tabelas
from cadastro_contatos.logs.logging_factory import LoggerFactory


def criar_usuario(repo: UsuarioRepository, settings: Settings, email: str, senha: str, claims=()) -> Usuario:
    erros = validar_registro(email, senha, senha, settings)
    if erros:
        raise ValueError(f"Dados inválidos: {erros}")
    violacoes = verificar_politica_senha(senha, settings)
    if violacoes:
        raise ValueError("; ".join(v["description"] for v in violacoes))

    usuario = Usuario(
        id=str(uuid.uuid4()),
        email=email.strip(),
        senha_hash=gerar_hash_senha(senha),
        email_confirmado=True,
        claims={(tipo, tipo) for tipo in claims},
    )
    repo.criar(usuario)
    return usuario


def main(argv=None, repo: UsuarioRepository = None, settings: Settings = None) -> int:
    parser = argparse.ArgumentParser(description="Gerenciamento de usuários do Cadastro de Contatos")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init-db", help="Criar as tabelas no banco")

    user_parser = subparsers.add_parser("create-user", help="Criar novo usuário")
    user_parser.add_argument("--email", required=True, help="Email do usuário")
    user_parser.add_argument("--senha", required=True, help="Senha do usuário")
    user_parser.add_argument("--claim", action="append", default=[],
                             help="Claim concedida (pode repetir), ex: ExcluirContato")

    claim_parser = subparsers.add_parser("add-claim", help="Conceder claim a um usuário existente")
    claim_parser.add_argument("--email", required=True, help="Email do usuário")
    claim_parser.add_argument("--tipo", required=True, help="Tipo da claim, ex: ExcluirContato")
    claim_parser.add_argument("--valor", help="Valor da claim (padrão: igual ao tipo)")

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    if settings is None:
        settings = carregar_settings()
    LoggerFactory.configurar(settings.LOG_DIR)
    if repo is None:
        repo = PostgresUsuarioRepository(settings)

    try:
        if args.command == "init-db":
            criar_tabelas(settings)
            print("✅ Tabelas criadas.")

        elif args.command == "create-user":
            usuario = criar_usuario(repo, settings, args.email, args.senha, args.claim)
            print(f"✅ Usuário {usuario.email} criado com sucesso. ID={usuario.id}")

        elif args.command == "add-claim":
            repo.adicionar_claim(args.email, args.tipo, args.valor or args.tipo)
            print(f"✅ Claim '{args.tipo}' concedida a {args.email}.")
    except (ErroCadastro, ValueError) as e:
        print(f"❌ Erro: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
