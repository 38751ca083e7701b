import pytest

from cadastro_contatos.logs.logging_factory import LoggerFactory
from cadastro_contatos.main import criar_app


@pytest.fixture(autouse=True)
def restaurar_logs():
    yield
    LoggerFactory.configurar(None)


def test_log_dir_das_settings_grava_arquivo(settings, usuario_repo, contato_repo, tmp_path):
    settings.LOG_DIR = str(tmp_path / "logs")

    criar_app(settings, usuario_repo=usuario_repo, contato_repo=contato_repo)
    LoggerFactory.get_logger("contato_service").info("✅ teste de log")

    arquivo = tmp_path / "logs" / "contato_service.log"
    assert arquivo.exists()
    assert "teste de log" in arquivo.read_text(encoding="utf-8")


def test_configurar_none_remove_arquivos(tmp_path):
    LoggerFactory.configurar(str(tmp_path))
    logger = LoggerFactory.get_logger("teste_logs")
    assert any(type(h).__name__ == "FileHandler" for h in logger.handlers)

    LoggerFactory.configurar(None)

    assert not any(type(h).__name__ == "FileHandler" for h in logger.handlers)
