import os
import sys
import unittest
import keyring
import yaml
sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from cli import main
from config import KEYRING_SERVICE, SETTINGS_ENV, YamlConfig
from rest_api import LedgerAPI
from settings_schema import load_settings, update_settings, validate_settings


class DummyKeyring(keyring.backend.KeyringBackend):
    priority = 1
    def __init__(self):
        self.store = {}
    def get_password(self, service, username):
        return self.store.get((service, username))
    def set_password(self, service, username, password):
        self.store[(service, username)] = password
    def delete_password(self, service, username):
        self.store.pop((service, username), None)


def _read_raw(path: str) -> dict:
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f)


class SettingsEncryptionTest(unittest.TestCase):
    def setUp(self) -> None:
        self.keyring = DummyKeyring()
        keyring.set_keyring(self.keyring)
        os.environ['ENCRYPT_SETTINGS'] = '1'
        self.path = 'enc_settings.yaml'
        self.db_path = 'enc_settings.db'
        self.cleanup()

    def tearDown(self) -> None:
        self.cleanup()
        os.environ.pop('ENCRYPT_SETTINGS', None)

    def cleanup(self) -> None:
        for path in [self.path, self.db_path]:
            if os.path.exists(path):
                os.remove(path)

    def test_encrypt_and_load(self) -> None:
        cfg = YamlConfig(self.path)
        cfg.save({'coach_api_key': 'secret', 'log_level': 'DEBUG'})
        raw = _read_raw(self.path)
        self.assertEqual(raw['coach_api_key'], YamlConfig.PLACEHOLDER)
        self.assertEqual(self.keyring.store[(KEYRING_SERVICE, 'coach_api_key')], 'secret')
        data = cfg.load()
        self.assertEqual(data['coach_api_key'], 'secret')
        self.assertEqual(data['log_level'], 'DEBUG')
        self.assertEqual(load_settings(self.path)['coach_api_key'], 'secret')

    def test_placeholder_resolved_without_flag(self) -> None:
        YamlConfig(self.path).save({'coach_api_key': 'secret'})
        os.environ.pop('ENCRYPT_SETTINGS')
        self.assertEqual(YamlConfig(self.path).load()['coach_api_key'], 'secret')

    def test_missing_secret_falls_back_to_default(self) -> None:
        YamlConfig(self.path).save({'coach_api_key': 'secret'})
        self.keyring.store.clear()
        self.assertNotIn('coach_api_key', YamlConfig(self.path).load())
        self.assertEqual(load_settings(self.path)['coach_api_key'], '')

    def test_update_keeps_stored_secret(self) -> None:
        cfg = YamlConfig(self.path)
        cfg.save({'coach_api_key': 'secret'})
        data = cfg.update({'log_level': 'WARNING'})
        self.assertEqual(data['coach_api_key'], 'secret')
        self.assertEqual(self.keyring.store[(KEYRING_SERVICE, 'coach_api_key')], 'secret')
        self.assertEqual(_read_raw(self.path)['coach_api_key'], YamlConfig.PLACEHOLDER)

    def test_coach_key_round_trip(self) -> None:
        main([
            '--settings', self.path, 'config',
            '--set', 'coach_api_key=secret', '--set', 'default_reps=10',
        ])
        raw = _read_raw(self.path)
        self.assertEqual(raw['coach_api_key'], YamlConfig.PLACEHOLDER)
        self.assertEqual(raw['default_reps'], 10)
        api = LedgerAPI(db_path=self.db_path, yaml_path=self.path)
        self.assertEqual(api.coach.api_key, 'secret')
        self.assertEqual(api.settings['default_reps'], 10)


class SettingsSchemaTest(unittest.TestCase):
    def setUp(self) -> None:
        self.path = 'schema_settings.yaml'
        if os.path.exists(self.path):
            os.remove(self.path)

    def tearDown(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
        os.environ.pop(SETTINGS_ENV, None)

    def test_defaults(self) -> None:
        settings = load_settings(self.path)
        self.assertEqual(settings['db_path'], 'workout.db')
        self.assertEqual(settings['default_reps'], 8)
        self.assertEqual(settings['default_weight_step'], '5')

    def test_path_from_environment(self) -> None:
        os.environ[SETTINGS_ENV] = self.path
        YamlConfig().save({'db_path': 'elsewhere.db'})
        self.assertTrue(os.path.exists(self.path))
        self.assertEqual(load_settings()['db_path'], 'elsewhere.db')

    def test_overrides(self) -> None:
        YamlConfig(self.path).save({'default_reps': 10, 'coach_timeout': 5})
        settings = load_settings(self.path)
        self.assertEqual(settings['default_reps'], 10)
        self.assertEqual(settings['coach_timeout'], 5.0)

    def test_update_settings_coerces(self) -> None:
        settings = update_settings({'default_weight': '62.5'}, self.path)
        self.assertEqual(settings['default_weight'], 62.5)
        self.assertEqual(_read_raw(self.path), {'default_weight': 62.5})

    def test_invalid(self) -> None:
        with self.assertRaises(ValueError):
            validate_settings({'default_reps': 'many'})
        with self.assertRaises(ValueError):
            update_settings({'default_reps': 'many'}, self.path)
        with self.assertRaises(ValueError):
            update_settings({'theme': 'dark'}, self.path)
        self.assertFalse(os.path.exists(self.path))
        YamlConfig(self.path).save({'coach_timeout': 'soon'})
        with self.assertRaises(ValueError):
            load_settings(self.path)

    def test_non_mapping_file(self) -> None:
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write('- a\n- b\n')
        with self.assertRaises(ValueError):
            load_settings(self.path)

    def test_cli_rejects_bad_assignment(self) -> None:
        with self.assertRaises(SystemExit):
            main(['--settings', self.path, 'config', '--set', 'default_reps'])
        self.assertFalse(os.path.exists(self.path))


if __name__ == '__main__':
    unittest.main()
