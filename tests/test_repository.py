"""内存仓储与数据库模块"""

from typing import Optional

import pytest

from modboot import ConfigurationError, DuplicateEntryError, ModuleDescriptor, Provider
from modboot.core import SETTINGS
from modboot.data import (
    DATA_SOURCE,
    BaseEntity,
    DatabaseModule,
    DataSource,
    InMemoryRepository,
    repository_token,
)


class Note(BaseEntity):
    text: str
    author: Optional[str] = None


@pytest.fixture
def repository():
    return InMemoryRepository(Note, DataSource())


def test_save_assigns_id_and_timestamps(repository):
    note = repository.save(repository.create(text="hello"))

    assert note.id == 1
    assert note.created_at is not None
    assert note.updated_at is not None
    assert repository.find_one(1).text == "hello"


def test_create_does_not_persist(repository):
    repository.create(text="draft")

    assert repository.find() == []


def test_find_filters_by_fields(repository):
    repository.save(repository.create(text="a", author="ann"))
    repository.save(repository.create(text="b", author="bob"))
    repository.save(repository.create(text="c", author="ann"))

    assert [n.text for n in repository.find({'author': 'ann'})] == ["a", "c"]
    assert repository.find_one_by(author="bob").text == "b"
    assert repository.find_one_by(author="nobody") is None


def test_save_updates_existing_row(repository):
    note = repository.save(repository.create(text="old"))
    note.text = "new"

    updated = repository.save(note)

    assert updated.id == note.id
    assert updated.created_at == note.created_at
    assert repository.find_one(note.id).text == "new"
    assert repository.count() == 1


def test_returned_entities_are_copies(repository):
    note = repository.save(repository.create(text="kept"))
    note.text = "changed locally"

    assert repository.find_one(note.id).text == "kept"


def test_remove(repository):
    note = repository.save(repository.create(text="gone"))

    repository.remove(note)

    assert repository.find_one(note.id) is None


def test_save_rejects_other_entity_types(repository):
    class Other(BaseEntity):
        pass

    with pytest.raises(TypeError):
        repository.save(Other())


class Account(BaseEntity):
    unique_fields = ("email",)

    email: str


def test_explicit_id_advances_the_sequence(repository):
    first = repository.save(Note(id=1, text="first"))
    second = repository.save(repository.create(text="second"))

    assert first.id == 1
    assert second.id == 2
    assert [n.text for n in repository.find()] == ["first", "second"]


def test_generated_ids_skip_past_explicit_ones(repository):
    repository.save(Note(id=5, text="explicit"))

    assert repository.save(repository.create(text="next")).id == 6


def test_unique_fields_are_enforced():
    accounts = InMemoryRepository(Account, DataSource())
    ann = accounts.save(accounts.create(email="ann@example.com"))

    with pytest.raises(DuplicateEntryError) as exc_info:
        accounts.save(accounts.create(email="ann@example.com"))

    assert exc_info.value.field == "email"
    assert accounts.count() == 1
    # 更新自身不算冲突
    assert accounts.save(ann).id == ann.id


def test_close_clears_tables_in_place():
    data_source = DataSource()
    repository = InMemoryRepository(Note, data_source)
    repository.save(repository.create(text="gone"))

    data_source.close()

    assert repository.find() == []
    assert repository.save(repository.create(text="fresh")).id == 1


def test_default_table_name():
    assert Note.get_table_name() == "notes"


def test_unsupported_data_source_type():
    with pytest.raises(ConfigurationError) as exc_info:
        DataSource(type="postgres")

    assert exc_info.value.config_key == "database.type"


def test_for_feature_is_memoized():
    assert DatabaseModule.for_feature(Note) is DatabaseModule.for_feature(Note)


def test_database_module_wires_repositories(container):
    settings = ModuleDescriptor(
        "Settings",
        providers=[Provider.value_of(SETTINGS, {"database": {"type": "memory", "name": "test"}})],
        exports=[SETTINGS],
        is_global=True,
    )
    feature = DatabaseModule.for_feature(Note)
    consumer = ModuleDescriptor(
        "Notes",
        imports=[feature],
        providers=[Provider.factory_of("notes", lambda repo: repo, inject=[repository_token(Note)])],
    )
    container.register_module(settings)
    container.register_module(DatabaseModule.for_root())
    container.register_module_tree(consumer)
    container.bootstrap()

    repo = container.resolve(consumer, "notes")

    assert isinstance(repo, InMemoryRepository)
    assert container.resolve(consumer, DATA_SOURCE).name == "test"
    assert repo.save(repo.create(text="x")).id == 1


def test_database_module_custom_factory(container):
    root = DatabaseModule.for_root(use_factory=lambda: {"name": "custom"}, inject=[])
    container.register_module(root)

    assert container.resolve(root, DATA_SOURCE).name == "custom"
