import pytest

from hotelbooking import app
from hotelbooking.adapters.sqlite_adapter import DEFAULT_TIMEOUT, SQLiteBookingAdapter
from hotelbooking.config import (
    CONFIG_ENV_KEY,
    EnvironmentHotelBookingConfig,
    _import_config_class,
    get_config,
    set_config,
)
from hotelbooking.exceptions import ConfigurationError
from hotelbooking.services import ReservationEngine


@pytest.fixture(autouse=True)
def reset_globals():
    set_config(None)
    app.set_adapter(None)
    yield
    set_config(None)
    app.set_adapter(None)


class TestEnvironmentConfig:

    def test_defaults(self, monkeypatch):
        for key in ("DATABASE_URL", "STORAGE_TIMEOUT", "TELEGRAM_BOT_TOKEN", "HOTEL_NAME", "LOG_LEVEL"):
            monkeypatch.delenv(key, raising=False)
        config = EnvironmentHotelBookingConfig()
        assert config.get_database_url() == "sqlite:///hotelbooking.db"
        assert config.get_storage_timeout() == DEFAULT_TIMEOUT
        assert config.get_telegram_bot_token() is None
        assert config.get_hotel_display_name() == "Hotel Booking"
        assert config.get_log_level() == "INFO"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("STORAGE_TIMEOUT", "2.5")
        monkeypatch.setenv("HOTEL_NAME", "Seaside Inn")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        config = EnvironmentHotelBookingConfig()
        assert config.get_storage_timeout() == 2.5
        assert config.get_hotel_display_name() == "Seaside Inn"
        assert config.get_log_level() == "DEBUG"

    @pytest.mark.parametrize("raw", ["soon", "0", "-3"])
    def test_bad_timeout_falls_back(self, monkeypatch, raw):
        monkeypatch.setenv("STORAGE_TIMEOUT", raw)
        assert EnvironmentHotelBookingConfig().get_storage_timeout() == DEFAULT_TIMEOUT

    def test_create_adapter_initialises_store(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'nested' / 'hotel.db'}")
        monkeypatch.setenv("STORAGE_TIMEOUT", "1.5")
        adapter = EnvironmentHotelBookingConfig().create_adapter()
        assert isinstance(adapter, SQLiteBookingAdapter)
        assert adapter.timeout == 1.5
        assert adapter.list_rooms() == []


class TestConfigLoading:

    def test_default_class(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_KEY, raising=False)
        assert isinstance(get_config(), EnvironmentHotelBookingConfig)
        assert get_config() is get_config()

    def test_custom_class_from_env(self, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_KEY, "hotelbooking.config.EnvironmentHotelBookingConfig")
        assert isinstance(get_config(), EnvironmentHotelBookingConfig)

    @pytest.mark.parametrize(
        "path",
        [
            "NoDotsHere",
            "hotelbooking.does_not_exist.Config",
            "hotelbooking.config.MissingConfig",
            "hotelbooking.exceptions.StorageError",
        ],
    )
    def test_invalid_class_paths(self, path):
        with pytest.raises(ConfigurationError):
            _import_config_class(path)


class TestRuntimeWiring:

    def test_engine_built_from_config(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'hotel.db'}")
        engine = app.get_engine()
        assert isinstance(engine, ReservationEngine)
        assert engine is app.get_engine()
        assert engine.adapter is app.get_adapter()

    def test_set_adapter_resets_engine(self, adapter):
        app.set_adapter(adapter)
        engine = app.get_engine()
        assert engine.adapter is adapter

        other = SQLiteBookingAdapter(adapter.db_path)
        app.set_adapter(other)
        assert app.get_engine() is not engine
        assert app.get_engine().adapter is other
