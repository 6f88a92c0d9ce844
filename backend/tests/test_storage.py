from sqlmodel import Session

from cwl_app import storage
from cwl_app.core.config import Settings


def test_add_registration_appends_mirror(db_session: Session, settings: Settings):
    storage.add_registration(db_session, settings, player_name=" Ann ", th_level="th12")
    storage.add_registration(db_session, settings, player_name="Bo", th_level="th10")
    assert storage.read_mirror(settings) == "Ann th12\nBo th10\n"


def test_to_registered_player_keeps_identity(db_session: Session, settings: Settings):
    row = storage.add_registration(db_session, settings, player_name="Ann", th_level="th12")
    player = storage.to_registered_player(row)
    assert player.id == row.id
    assert player.name == "Ann"
    assert player.th_level == "th12"
    assert player.registered_at == row.registered_at


def test_delete_unknown_registration(db_session: Session, settings: Settings):
    assert storage.delete_registration(db_session, settings, "missing") is False


def test_read_mirror_without_file(settings: Settings):
    assert storage.read_mirror(settings) == ""


def test_load_clan_configuration_writes_defaults(settings: Settings):
    config = storage.load_clan_configuration(settings)
    assert config == storage.DEFAULT_CLAN_CONFIGURATION
    assert (settings.data_path / settings.clan_config_file).exists()


def test_save_message(db_session: Session):
    saved = storage.save_message(db_session, "Gold League\n\n")
    assert saved.id
    assert saved.content == "Gold League\n\n"
