import pytest
from cryptography.fernet import Fernet

from core.models import MODEL_STATUS_NEW, MODEL_STATUS_TRAINING, MLModel, Repo, User
from core.repositories import MLModelRepository, RepoRepository, UserRepository
from core.security.encryption import TokenEncryption


def test_count_unknown_filter_key_raises(test_session):
    repo = UserRepository(test_session)

    with pytest.raises(ValueError, match="Unknown filter key"):
        repo.count(typo_key=5)


def test_owned_rows_are_scoped(test_session):
    models = MLModelRepository(test_session)
    mine = models.create(owner_id=1, name="mine")
    theirs = models.create(owner_id=2, name="theirs")

    assert [m.id for m in models.list_for_owner(1)] == [mine.id]
    assert models.get_for_owner(1, theirs.id) is None
    assert models.get_for_owner(2, theirs.id) is theirs
    assert models.count(owner_id=1) == 1


def test_new_model_defaults(test_session):
    model = MLModelRepository(test_session).create(owner_id=1, name="triage")

    assert model.status == MODEL_STATUS_NEW
    assert model.training_started_at is None


def test_start_training(test_session):
    models = MLModelRepository(test_session)
    model = models.start_training(models.create(owner_id=1, name="triage"))

    assert model.status == MODEL_STATUS_TRAINING
    assert model.training_started_at is not None


def test_update_ignores_unknown_attributes(test_session):
    models = MLModelRepository(test_session)
    model = models.update(models.create(owner_id=1, name="old"), name="new", nonsense=1)

    assert model.name == "new"
    assert not hasattr(model, "nonsense")


def test_record_event(test_session):
    repos = RepoRepository(test_session)
    repo = repos.create(id=10, owner_id=1, full_name="octocat/hello-world", webhook_secret="s")

    repos.record_event(repo, "issues")
    repos.record_event(repo, "ping")

    assert repo.event_count == 2
    assert repo.last_event == "ping"
    assert repo.last_event_at is not None
    assert (repo.owner, repo.name) == ("octocat", "hello-world")


def test_deleting_model_detaches_repos(db):
    with db.session() as session:
        model = MLModelRepository(session).create(owner_id=1, name="triage")
        RepoRepository(session).create(id=10, owner_id=1, full_name="a/b", model_id=model.id)
        model_id = model.id

    with db.session() as session:
        models = MLModelRepository(session)
        models.delete(models.get_by_id(model_id))

    with db.session() as session:
        assert session.get(Repo, 10).model_id is None
        assert session.get(MLModel, model_id) is None


class TestUserRepository:
    def test_create_then_update(self, test_session):
        users = UserRepository(test_session)
        users.create_or_update_from_github(github_id=5, login="old", access_token="gho_1")

        user = users.create_or_update_from_github(github_id=5, login="new", access_token="gho_2")

        assert users.count() == 1
        assert user.login == "new"
        assert users.get_decrypted_token(user) == "gho_2"

    def test_token_encrypted_at_rest(self, test_session):
        users = UserRepository(test_session, TokenEncryption(Fernet.generate_key().decode()))

        user = users.create_or_update_from_github(github_id=5, login="octocat", access_token="gho_1")

        assert user.github_access_token != "gho_1"
        assert users.get_decrypted_token(user) == "gho_1"

    def test_missing_token(self, test_session):
        users = UserRepository(test_session)
        user = users.create_or_update_from_github(github_id=5, login="octocat")

        assert users.get_decrypted_token(user) is None
        assert test_session.get(User, 5) is user
