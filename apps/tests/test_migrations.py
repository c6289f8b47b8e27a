import pytest
from django.core.management import call_command
from django.db import connection
from django.db.migrations.loader import MigrationLoader

LOCAL_APPS = ['accounts', 'stores', 'catalog', 'inventory', 'finance', 'purchases', 'sales']


@pytest.mark.django_db
class TestMigrations:

    def test_every_app_has_initial_migration(self):
        loader = MigrationLoader(connection, ignore_no_migrations=True)
        for app_label in LOCAL_APPS:
            assert (app_label, '0001_initial') in loader.disk_migrations

    def test_user_model_migrates_before_its_dependents(self):
        loader = MigrationLoader(connection, ignore_no_migrations=True)
        plan = loader.graph.forwards_plan(('token_blacklist', '0001_initial'))
        assert ('accounts', '0001_initial') in plan

    def test_models_match_migrations(self):
        call_command('makemigrations', *LOCAL_APPS, check=True, dry_run=True, verbosity=0)
