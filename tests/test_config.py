from pathlib import Path

import pytest
from pydantic import ValidationError

from granate.config import DEFAULT_USER_AGENT, GranateConfig, load_config
from granate.context import OperationContext, create_faker


def test_defaults() -> None:
    config = load_config(None)

    assert config.user_agent == DEFAULT_USER_AGENT
    assert config.timeout == 30.0
    assert config.list_length == 2
    assert config.locale is None
    assert config.seed is None


def test_load_config_with_aliases(tmp_path: Path) -> None:
    config_path = tmp_path / "granate.yaml"
    config_path.write_text("userAgent: todo-client/1.0\ntimeout: 5\nlistLength: 4\nlocale: de_DE\nseed: 9\n")

    config = load_config(config_path)

    assert config == GranateConfig(user_agent="todo-client/1.0", timeout=5, list_length=4, locale="de_DE", seed=9)
    assert config.model_dump(by_alias=True)["userAgent"] == "todo-client/1.0"


def test_load_empty_config(tmp_path: Path) -> None:
    config_path = tmp_path / "granate.yaml"
    config_path.write_text("")

    assert load_config(config_path) == GranateConfig()


def test_load_config_not_a_mapping(tmp_path: Path) -> None:
    config_path = tmp_path / "granate.yaml"
    config_path.write_text("- userAgent\n")

    with pytest.raises(ValueError, match="must contain a mapping"):
        load_config(config_path)


@pytest.mark.parametrize(
    "content",
    ["unknown: 1\n", "timeout: 0\n", "listLength: -1\n", 'userAgent: ""\n'],
)
def test_load_invalid_config(tmp_path: Path, content: str) -> None:
    config_path = tmp_path / "granate.yaml"
    config_path.write_text(content)

    with pytest.raises(ValidationError):
        load_config(config_path)


def test_create_faker_is_seeded() -> None:
    config = GranateConfig(seed=5)

    assert create_faker(config).name() == create_faker(config).name()


def test_create_faker_locale() -> None:
    assert "de_DE" in create_faker(GranateConfig(locale="de_DE")).locales


def test_operation_context_defaults() -> None:
    context = OperationContext()

    assert context.values == {}
    assert context.request_defaults == {}
    assert context.loader is None
    assert context.http_session is None
