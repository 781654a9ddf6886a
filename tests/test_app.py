import logging

from spendwise.crud import crud_goal
from spendwise.logging_config import QUIET_LOGGERS, get_logger, setup_logging


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == "Server is running."


def test_unhandled_errors_return_generic_500(make_client, monkeypatch):
    client = make_client("alice", raise_server_exceptions=False)

    def boom(*args, **kwargs):
        raise RuntimeError("secret connection string in here")

    monkeypatch.setattr(crud_goal, "read_db_goals", boom)
    response = client.get("/goals/")
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


def test_get_logger_namespaces_under_app_logger():
    assert get_logger("crud").name == "spendwise.crud"
    assert get_logger("spendwise.services").name == "spendwise.services"


def test_setup_logging_levels(tmp_path):
    log_file = tmp_path / "logs" / "app.log"
    logger = setup_logging(app_log_level="DEBUG", third_party_log_level="ERROR", log_file=str(log_file))
    try:
        assert logger.level == logging.DEBUG
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.ERROR
        assert len(logger.handlers) == 2

        logger.debug("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in log_file.read_text()
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
