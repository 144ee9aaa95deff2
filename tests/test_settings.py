from page_meta_core.config import Settings


def test_settings_defaults() -> None:
    settings = Settings.model_validate({})
    assert settings.sentinel_header == "X-Meta-Proxy-Request"
    assert settings.stop_at_head_end is False
    assert settings.max_redirects == 10


def test_settings_parses_env_aliases() -> None:
    settings = Settings.model_validate(
        {
            "SENTINEL_HEADER": "X-Loop-Guard",
            "FETCH_TIMEOUT_S": "5",
            "STOP_AT_HEAD_END": "true",
            "LOG_JSON": "1",
        }
    )
    assert settings.sentinel_header == "X-Loop-Guard"
    assert settings.fetch_timeout_s == 5.0
    assert settings.stop_at_head_end is True
    assert settings.log_json is True
