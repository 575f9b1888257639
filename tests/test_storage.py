import pytest

from tailfw.config_types import CONFIG_BLOB_SIZE, AxisConfig, SystemConfig
from tailfw.storage import (
    MAIN_NAMESPACE,
    MAX_PROFILE_SLOTS,
    ConfigStore,
    profile_namespace,
)


def sample_config():
    config = SystemConfig()
    config.num_layers = 2
    config.motion_pattern.pattern_id = 1
    config.motion_pattern.params[0] = 2.5
    config.axes[1] = AxisConfig(0.0, -45.0, 45.0)
    config.servos[3].pid.kp = 1.5
    return config


def test_profile_namespace():
    assert profile_namespace(0) == "tail_prof0"
    assert profile_namespace(3) == "tail_prof3"


@pytest.mark.parametrize("slot", [-1, MAX_PROFILE_SLOTS])
def test_profile_namespace_rejects_bad_slot(slot):
    with pytest.raises(ValueError):
        profile_namespace(slot)


def test_round_trip(tmp_path):
    store = ConfigStore(tmp_path)
    config = sample_config()
    store.save_config(MAIN_NAMESPACE, config)
    assert store.load_config(MAIN_NAMESPACE) == config


def test_missing_namespace_loads_none(tmp_path):
    store = ConfigStore(tmp_path)
    assert store.load_config(MAIN_NAMESPACE) is None


def test_wrong_size_loads_none(tmp_path):
    store = ConfigStore(tmp_path)
    (tmp_path / f"{MAIN_NAMESPACE}.cfg").write_bytes(b"\x00" * (CONFIG_BLOB_SIZE - 1))
    assert store.load_config(MAIN_NAMESPACE) is None


def test_erase(tmp_path):
    store = ConfigStore(tmp_path)
    store.save_config("tail_prof1", sample_config())
    store.erase("tail_prof1")
    assert store.load_config("tail_prof1") is None
    store.erase("tail_prof1")
    assert store.load_config("tail_prof1") is None


def test_profile_slots(tmp_path):
    store = ConfigStore(tmp_path)
    assert store.profile_slots() == [False] * MAX_PROFILE_SLOTS
    store.save_config(profile_namespace(2), sample_config())
    store.save_config(MAIN_NAMESPACE, sample_config())
    assert store.profile_slots() == [False, False, True, False]


def test_profile_slot_with_bad_size_is_empty(tmp_path):
    store = ConfigStore(tmp_path)
    (tmp_path / "tail_prof0.cfg").write_bytes(b"\x01\x02")
    assert store.profile_slots()[0] is False


@pytest.mark.parametrize("namespace", ["", "a/b", "x" * 16, "../up"])
def test_invalid_namespace(tmp_path, namespace):
    store = ConfigStore(tmp_path)
    with pytest.raises(ValueError):
        store.load_config(namespace)


def test_overwrite_keeps_latest(tmp_path):
    store = ConfigStore(tmp_path)
    store.save_config(MAIN_NAMESPACE, SystemConfig())
    newer = sample_config()
    store.save_config(MAIN_NAMESPACE, newer)
    loaded = store.load_config(MAIN_NAMESPACE)
    assert loaded.motion_pattern.params[0] == 2.5
    assert loaded.num_layers == 2