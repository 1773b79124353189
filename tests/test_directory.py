import unittest

import pytest

from litewire import Container, ContainerDirectory, ErrorCode, RegistrationError, ResolutionError, Token, injectable


class TestContainerDirectoryBehavior(unittest.TestCase):
    directory: ContainerDirectory
    app: Container
    infra: Container

    def setUp(self):
        self.directory = ContainerDirectory()
        self.app = Container("App", directory=self.directory)
        self.infra = Container("Infra", directory=self.directory)

    def test_named_containers_register_themselves(self):
        assert self.directory.get("App") is self.app
        assert self.directory.get("Infra") is self.infra
        assert self.app.directory is self.directory
        assert self.app.name == "App"

    def test_duplicate_container_name_raises(self):
        with pytest.raises(RegistrationError) as ctx:
            Container("App", directory=self.directory)
        assert ctx.value.code is ErrorCode.ITEM_ALREADY_EXISTS

    def test_unnamed_container_is_not_listed(self):
        Container(directory=self.directory)
        assert len(self.directory.get_all()) == 2

    def test_class_is_resolved_through_its_owning_container(self):
        db_token = Token("db")
        repo_token = Token("repo")
        db = object()

        @injectable("Infra", db_token)
        class Repo:
            def __init__(self, db):
                self.db = db

        self.infra.register(db_token, db)
        # registered in App, dependencies live in Infra
        self.app.register(repo_token, Repo)

        repo = self.app.get(repo_token)

        assert repo.db is db
        assert not self.app.has(db_token)

    def test_dependency_missing_from_owning_container_fails(self):
        db_token = Token("db")

        @injectable("Infra", db_token)
        class Repo:
            def __init__(self, db):
                self.db = db

        self.app.register(db_token, object())

        with pytest.raises(ResolutionError) as ctx:
            self.app.resolve(Repo)

        assert ctx.value.code is ErrorCode.DEPENDENCY_RESOLUTION_FAILED
        assert ctx.value.context["target_container"] == "Infra"

    def test_owning_container_must_exist(self):
        @injectable("Later")
        class Service: ...

        with pytest.raises(ResolutionError) as ctx:
            self.app.resolve(Service)
        assert ctx.value.code is ErrorCode.CONTAINER_NOT_FOUND
        assert ctx.value.context == {"class_name": Service.__qualname__, "container_name": "Later"}

        Container("Later", directory=self.directory)
        assert isinstance(self.app.resolve(Service), Service)

    def test_unregistered_container_is_no_longer_found(self):
        @injectable("Infra")
        class Service: ...

        self.directory.unregister("Infra")

        with pytest.raises(ResolutionError) as ctx:
            self.app.resolve(Service)
        assert ctx.value.code is ErrorCode.CONTAINER_NOT_FOUND

    def test_containers_in_separate_directories_do_not_see_each_other(self):
        Container("Elsewhere")

        @injectable("Elsewhere")
        class Service: ...

        with pytest.raises(ResolutionError):
            self.app.resolve(Service)

    def test_token_container_names(self):
        name = Token("core")
        core = Container(name, directory=self.directory)

        @injectable(name)
        class Service: ...

        assert self.directory.get(name) is core
        assert isinstance(self.app.resolve(Service), Service)
