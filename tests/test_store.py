import pytest

from plugin_config.core.defaults import DefaultTable
from plugin_config.core.ports import MenuController, PersistenceBackend
from plugin_config.core.registry import get_registry
from plugin_config.core.store import PluginConfig
from plugin_config.errors import InvalidArgumentError, PersistenceError


class _Persistence(PersistenceBackend):
    def __init__(self, stored=None, fail_save=False):
        self.stored = stored or {}
        self.fail_save = fail_save
        self.saves = []

    def load(self, plugin_id: str):
        return self.stored.get(plugin_id)

    def save(self, plugin_id: str, config: dict) -> None:
        if self.fail_save:
            raise PersistenceError(plugin_id, "disk full")
        self.saves.append((plugin_id, config))


class _Menu(MenuController):
    def __init__(self):
        self.calls = []

    def set_menu_options(self, plugin_id: str, config: dict) -> None:
        self.calls.append((plugin_id, config))


DEFAULTS = DefaultTable(
    {
        "downloader": {"folder": "~/Music", "format": "mp3", "quality": 5},
    }
)


def _store(persistence=None, **kwargs):
    return PluginConfig("downloader", persistence=persistence or _Persistence(), defaults=DEFAULTS, **kwargs)


def test_merges_defaults_with_persisted_overrides():
    persistence = _Persistence({"downloader": {"format": "opus", "skip_existing": True}})
    store = _store(persistence)

    assert store.get_all() == {
        "folder": "~/Music",
        "format": "opus",
        "quality": 5,
        "skip_existing": True,
    }
    assert store.get_default_config() == {"folder": "~/Music", "format": "mp3", "quality": 5}


def test_initial_overrides_take_precedence_over_persistence():
    persistence = _Persistence({"downloader": {"format": "opus"}})
    store = _store(persistence, initial_overrides={"quality": 9})

    assert store.get("format") == "mp3"
    assert store.get("quality") == 9


def test_unknown_plugin_uses_override_source_only():
    persistence = _Persistence({"lyrics": {"enabled": True}})
    store = PluginConfig("lyrics", persistence=persistence, defaults=DEFAULTS)

    assert store.get_all() == {"enabled": True}
    assert store.get_default_config() == {}


def test_unknown_plugin_without_overrides_is_empty():
    store = PluginConfig("lyrics", persistence=_Persistence())

    assert store.get_all() == {}
    assert store.get("anything") is None


def test_get_all_returns_a_copy():
    store = _store()
    snapshot = store.get_all()
    snapshot["folder"] = "/elsewhere"

    assert store.get("folder") == "~/Music"
    assert snapshot is not store.get_all()


def test_default_config_cannot_be_mutated_through_result():
    store = _store()
    store.get_default_config()["format"] = "wav"
    store.set("format", "flac")

    assert store.get_default_config()["format"] == "mp3"


def test_nested_live_values_do_not_alias_defaults():
    table = DefaultTable({"lyrics": {"tags": ["a"], "opts": {"x": 1}}})
    store = PluginConfig("lyrics", persistence=_Persistence(), defaults=table)

    store.get("tags").append("b")
    store.get("opts")["x"] = 2

    assert store.get_default_config() == {"tags": ["a"], "opts": {"x": 1}}


def test_nested_default_config_cannot_be_mutated_through_result():
    table = DefaultTable({"lyrics": {"opts": {"x": 1}}})
    store = PluginConfig("lyrics", persistence=_Persistence(), defaults=table)

    store.get_default_config()["opts"]["x"] = 99

    assert store.get_default_config()["opts"] == {"x": 1}
    assert store.get("opts") == {"x": 1}


def test_initial_overrides_are_not_shared_with_caller():
    overrides = {"formats": ["mp3"]}
    store = _store(initial_overrides=overrides)

    overrides["formats"].append("wav")

    assert store.get("formats") == ["mp3"]


def test_set_updates_notifies_and_persists_once():
    persistence = _Persistence()
    store = _store(persistence)
    seen = []
    store.subscribe("folder", seen.append)

    store.set("folder", "/tmp/music")

    assert store.get("folder") == "/tmp/music"
    assert seen == ["/tmp/music"]
    assert persistence.saves == [("downloader", {"folder": "/tmp/music", "format": "mp3", "quality": 5})]


def test_set_fires_all_subscribers_in_order_with_fresh_config():
    store = _store()
    order = []
    store.subscribe_all(lambda config: order.append(("first", config["quality"])))
    store.subscribe_all(lambda config: order.append(("second", config["quality"])))

    store.set("quality", 7)
    store.set("quality", 8)

    assert order == [("first", 7), ("second", 7), ("first", 8), ("second", 8)]


def test_notify_happens_before_persist():
    events = []

    class _OrderedPersistence(_Persistence):
        def save(self, plugin_id, config):
            events.append("save")

    store = _store(_OrderedPersistence())
    store.subscribe("format", lambda value: events.append("key"))
    store.subscribe_all(lambda config: events.append("all"))

    store.set("format", "wav")

    assert events == ["key", "all", "save"]


def test_set_all_fires_only_changed_keys_and_bulk_once():
    persistence = _Persistence()
    store = _store(persistence, initial_overrides={"quality": 2})
    per_key = []
    bulk = []
    store.subscribe("format", lambda value: per_key.append(("format", value)))
    store.subscribe("quality", lambda value: per_key.append(("quality", value)))
    store.subscribe_all(bulk.append)

    store.set_all({"format": "flac", "quality": 2})

    assert per_key == [("format", "flac")]
    assert bulk == [{"folder": "~/Music", "format": "flac", "quality": 2}]
    assert len(persistence.saves) == 1


def test_set_all_bulk_sees_every_updated_field():
    store = _store()
    bulk = []
    store.subscribe_all(bulk.append)

    store.set_all({"format": "flac", "quality": 1})

    assert bulk == [{"folder": "~/Music", "format": "flac", "quality": 1}]


@pytest.mark.parametrize("patch", [{}, {"format": "mp3", "quality": 5}])
def test_set_all_without_changes_still_persists_once(patch):
    persistence = _Persistence()
    store = _store(persistence)
    fired = []
    store.subscribe("format", fired.append)
    store.subscribe_all(fired.append)

    store.set_all(patch)

    assert fired == []
    assert len(persistence.saves) == 1


def test_set_all_none_clears_field():
    store = _store()
    seen = []
    bulk = []
    store.subscribe("format", seen.append)
    store.subscribe_all(bulk.append)

    store.set_all({"format": None, "cover": None})

    assert store.get("format") is None
    assert seen == [None]
    assert bulk == [{"folder": "~/Music", "format": None, "quality": 5, "cover": None}]


def test_set_all_none_on_field_already_none_is_no_change():
    persistence = _Persistence()
    store = _store(persistence, initial_overrides={"cover": None})
    fired = []
    store.subscribe("cover", fired.append)
    store.subscribe_all(fired.append)

    store.set_all({"cover": None})

    assert fired == []
    assert len(persistence.saves) == 1


@pytest.mark.parametrize("patch", [42, "format", ["format", "wav"], None])
def test_set_all_rejects_non_mapping(patch):
    persistence = _Persistence()
    store = _store(persistence)
    fired = []
    store.subscribe_all(fired.append)

    with pytest.raises(InvalidArgumentError):
        store.set_all(patch)

    assert store.get_all() == {"folder": "~/Music", "format": "mp3", "quality": 5}
    assert fired == []
    assert persistence.saves == []


def test_invalid_argument_is_a_type_error():
    with pytest.raises(TypeError):
        _store().set_all(42)


def test_set_and_maybe_restart_updates_menu_and_never_persists():
    persistence = _Persistence()
    menu = _Menu()
    store = _store(persistence, menu=menu)
    seen = []
    bulk = []
    store.subscribe("quality", seen.append)
    store.subscribe_all(bulk.append)

    store.set_and_maybe_restart("quality", 1)

    assert store.get("quality") == 1
    assert seen == [1]
    assert len(bulk) == 1
    assert menu.calls == [("downloader", {"folder": "~/Music", "format": "mp3", "quality": 1})]
    assert persistence.saves == []


def test_set_and_maybe_restart_without_menu():
    persistence = _Persistence()
    store = _store(persistence)

    store.set_and_maybe_restart("quality", 3)

    assert store.get("quality") == 3
    assert persistence.saves == []


def test_second_key_subscriber_replaces_first():
    store = _store()
    first = []
    second = []
    store.subscribe("folder", first.append)
    store.subscribe("folder", second.append)

    store.set("folder", "/a")

    assert first == []
    assert second == ["/a"]


def test_persistence_failure_propagates_without_rollback():
    store = _store(_Persistence(fail_save=True))
    seen = []
    store.subscribe("format", seen.append)

    with pytest.raises(PersistenceError):
        store.set("format", "wav")

    assert store.get("format") == "wav"
    assert seen == ["wav"]


def test_construction_registers_store():
    store = _store()

    assert get_registry().get("downloader") is store


def test_exposing_without_transport_is_rejected():
    with pytest.raises(ValueError):
        _store(expose_across_boundary=True)
