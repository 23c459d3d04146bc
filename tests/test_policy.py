from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from obrador.exceptions import EditWindowExpired, Forbidden
from obrador.timesheets.policy import (
    can_create_for,
    can_edit,
    check_edit,
    is_manager,
    resolve_owner_id,
)

from factories import make_entry, make_manager, make_principal

CREATED = datetime(2025, 3, 10, 17, 0)


def test_owner_inside_window_may_edit():
    check_edit(make_principal(), make_entry(created_at=CREATED), now=CREATED + timedelta(hours=23))


def test_window_boundary_is_inclusive():
    check_edit(make_principal(), make_entry(created_at=CREATED), now=CREATED + timedelta(hours=24))


def test_owner_past_window_is_refused():
    with pytest.raises(EditWindowExpired) as exc:
        check_edit(
            make_principal(), make_entry(created_at=CREATED),
            now=CREATED + timedelta(hours=24, seconds=1),
        )
    assert exc.value.message == "Solo podes editar durante las primeras 24 horas"
    assert exc.value.status_code == 403


def test_window_length_is_configurable():
    with pytest.raises(EditWindowExpired) as exc:
        check_edit(
            make_principal(), make_entry(created_at=CREATED),
            now=CREATED + timedelta(hours=3), window=timedelta(hours=2),
        )
    assert "2 horas" in exc.value.message


def test_someone_elses_record_is_forbidden():
    with pytest.raises(Forbidden) as exc:
        check_edit(make_principal(id=2, username="beto"), make_entry(user_id=1), now=CREATED)
    assert exc.value.message == "No podes editar este registro"


def test_forbidden_message_can_be_overridden():
    with pytest.raises(Forbidden) as exc:
        check_edit(
            make_principal(id=2), make_entry(user_id=1), now=CREATED,
            forbidden_message="No podes eliminar este registro",
        )
    assert exc.value.message == "No podes eliminar este registro"


def test_manager_bypasses_ownership_and_window():
    old = make_entry(user_id=1, created_at=datetime(2020, 1, 1))
    check_edit(make_manager(), old, now=CREATED)


def test_admin_role_counts_as_manager():
    admin = make_principal(id=5, username="root", roles=("admin",), submit=False)
    assert is_manager(admin)
    check_edit(admin, make_entry(user_id=1, created_at=datetime(2020, 1, 1)), now=CREATED)


def test_missing_created_at_falls_back_to_entry_date():
    entry = replace(make_entry(date="2025-03-10"), created_at=None)
    
    check_edit(make_principal(), entry, now=datetime(2025, 3, 10, 23, 0))
    with pytest.raises(EditWindowExpired):
        check_edit(make_principal(), entry, now=datetime(2025, 3, 11, 0, 1))


def test_unusable_timestamps_mean_expired():
    entry = replace(make_entry(), created_at="ayer", date="sin fecha")
    with pytest.raises(EditWindowExpired):
        check_edit(make_principal(), entry, now=CREATED)


def test_can_edit_reports_instead_of_raising():
    ana = make_principal()
    entry = make_entry(created_at=CREATED)
    assert can_edit(ana, entry, now=CREATED + timedelta(hours=1))
    assert not can_edit(ana, entry, now=CREATED + timedelta(days=2))
    assert not can_edit(make_principal(id=2), entry, now=CREATED)


def test_can_create_for():
    ana = make_principal()
    assert can_create_for(ana, None)
    assert can_create_for(ana, 1)
    assert not can_create_for(ana, 2)
    assert can_create_for(make_manager(), 2)


def test_resolve_owner_id_ignores_non_manager_request():
    ana = make_principal()
    assert resolve_owner_id(ana, None) == 1
    assert resolve_owner_id(ana, 2) == 1
    assert resolve_owner_id(ana, 2, current_owner_id=1) == 1


def test_resolve_owner_id_for_manager():
    sara = make_manager()
    assert resolve_owner_id(sara, None) == 9
    assert resolve_owner_id(sara, 2) == 2
    assert resolve_owner_id(sara, None, current_owner_id=1) == 1
    assert resolve_owner_id(sara, 3, current_owner_id=1) == 3
