import pytest

from personapi.db.models import PersonRecord
from personapi.errors import PersonNotFoundError, StorageError
from personapi.models import ListParams, Person


def add(store, name, surname, **fields):
    return store.create(Person(name=name, surname=surname, **fields))


def test_create_assigns_id_and_timestamps(store):
    saved = add(store, "Jane", "Doe", age=0, gender="female", nationality="GB")

    assert saved.id is not None
    assert saved.created_at is not None
    assert saved.age == 0

    fetched = store.get(saved.id)
    assert fetched.name == "Jane"
    assert fetched.age == 0
    assert fetched.patronymic is None
    assert fetched.created_at == saved.created_at


def test_update_overwrites_row_and_keeps_created_at(store):
    saved = add(store, "Old", "Name", age=20)

    updated = store.update(saved.id, saved.with_changes({"name": "New", "age": 25}))

    assert updated.id == saved.id
    assert updated.name == "New"
    assert updated.age == 25
    assert updated.created_at == saved.created_at
    assert store.get(saved.id).name == "New"


def test_missing_ids_raise_not_found(store):
    with pytest.raises(PersonNotFoundError):
        store.get(999)
    with pytest.raises(PersonNotFoundError):
        store.update(999, Person(name="A", surname="B"))
    with pytest.raises(PersonNotFoundError):
        store.delete(999)


def test_delete_removes_row(store, session_factory):
    saved = add(store, "Jane", "Doe")

    store.delete(saved.id)

    with session_factory() as session:
        assert session.get(PersonRecord, saved.id) is None


def test_constraint_violation_is_storage_error(store):
    with pytest.raises(StorageError):
        add(store, "Bad", "Age", age=-1)


def test_list_orders_by_id_and_counts_before_paging(store):
    for idx in range(7):
        add(store, f"Name{idx}", "Doe", age=20 + idx)

    page = store.list(ListParams(offset=5, limit=5))

    assert page.total == 7
    assert [p.name for p in page.items] == ["Name5", "Name6"]


def test_list_filters(store):
    add(store, "Anna", "Ivanova", age=30, gender="female", nationality="RU")
    add(store, "Hannah", "Smith", age=17, gender="female", nationality="GB")
    add(store, "Ivan", "Petrov", age=45, gender="male", nationality="RU")
    add(store, "Joan", "Doe")

    by_name = store.list(ListParams(name_contains="ANN", limit=10))
    assert sorted(p.name for p in by_name.items) == ["Anna", "Hannah"]

    by_surname = store.list(ListParams(surname_contains="ov", limit=10))
    assert [p.surname for p in by_surname.items] == ["Ivanova", "Petrov"]

    by_age = store.list(ListParams(min_age=18, max_age=45, limit=10))
    assert [p.name for p in by_age.items] == ["Anna", "Ivan"]
    assert by_age.total == 2

    by_country = store.list(ListParams(nationality="RU", gender="male", limit=10))
    assert [p.name for p in by_country.items] == ["Ivan"]


def test_list_empty_store(store):
    page = store.list(ListParams(limit=10))

    assert page.items == []
    assert page.total == 0


def test_name_filter_folds_cyrillic_case(store):
    add(store, "Дмитрий", "Ушаков")
    add(store, "Anna", "Ёлкина")

    by_name = store.list(ListParams(name_contains="дмит", limit=10))
    assert [p.name for p in by_name.items] == ["Дмитрий"]
    assert by_name.total == 1

    by_surname = store.list(ListParams(surname_contains="ЁЛК", limit=10))
    assert [p.surname for p in by_surname.items] == ["Ёлкина"]

    assert store.list(ListParams(name_contains="ANN", limit=10)).total == 1
