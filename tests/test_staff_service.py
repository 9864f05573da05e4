import pytest

from parkpass.domain.common import UserRole, StaffRole
from parkpass.domain.exceptions import NotFoundError


class TestUsers:
    """Test user accounts."""

    async def test_create_user_normalizes_email(self, staff_service):
        user = await staff_service.create_user("  Sam@Example.COM ", role=UserRole.SUPERVISOR, full_name="Sam")
        assert user.id is not None
        assert user.email == "sam@example.com"
        assert user.role == UserRole.SUPERVISOR

    async def test_duplicate_email(self, staff_service, sample_user):
        with pytest.raises(ValueError, match="already exists"):
            await staff_service.create_user("OWNER@example.com")

    async def test_list_users_by_role(self, staff_service, sample_user):
        await staff_service.create_user("cust@example.com")

        assert [u.email for u in await staff_service.list_users()] == ["owner@example.com", "cust@example.com"]
        assert [u.email for u in await staff_service.list_users(UserRole.CUSTOMER)] == ["cust@example.com"]

    async def test_get_missing_user(self, staff_service):
        with pytest.raises(NotFoundError, match="User 999 not found"):
            await staff_service.get_user(999)


class TestLotStaff:
    """Test staff assignments."""

    async def test_creator_is_listed_as_supervisor(self, staff_service, sample_lot, sample_user):
        staff = await staff_service.get_lot_staff(sample_lot.id)

        assert len(staff) == 1
        assert staff[0].user_id == sample_user.id
        assert staff[0].role == StaffRole.SUPERVISOR
        assert staff[0].user.email == "owner@example.com"

    async def test_assign_employee(self, staff_service, sample_lot):
        employee = await staff_service.create_user("emp@example.com")

        assignment = await staff_service.assign_staff(sample_lot.id, employee.id)

        assert assignment.role == StaffRole.EMPLOYEE
        assert assignment.user.email == "emp@example.com"
        staff = await staff_service.get_lot_staff(sample_lot.id)
        assert [s.role for s in staff] == [StaffRole.SUPERVISOR, StaffRole.EMPLOYEE]

    async def test_reassigning_changes_role(self, staff_service, sample_lot):
        employee = await staff_service.create_user("emp@example.com")
        await staff_service.assign_staff(sample_lot.id, employee.id, StaffRole.EMPLOYEE)

        promoted = await staff_service.assign_staff(sample_lot.id, employee.id, StaffRole.SUPERVISOR)

        assert promoted.role == StaffRole.SUPERVISOR
        assert len(await staff_service.get_lot_staff(sample_lot.id)) == 2

    async def test_assign_unknown_user(self, staff_service, sample_lot):
        with pytest.raises(NotFoundError):
            await staff_service.assign_staff(sample_lot.id, 999)

    async def test_assign_unknown_lot(self, staff_service, sample_user):
        with pytest.raises(NotFoundError, match="Lot 999"):
            await staff_service.assign_staff(999, sample_user.id)

    async def test_remove_staff(self, staff_service, sample_lot, sample_user):
        await staff_service.remove_staff(sample_lot.id, sample_user.id)
        assert await staff_service.get_lot_staff(sample_lot.id) == []

    async def test_remove_unassigned_user(self, staff_service, sample_lot):
        outsider = await staff_service.create_user("outsider@example.com")
        with pytest.raises(NotFoundError, match="Staff assignment"):
            await staff_service.remove_staff(sample_lot.id, outsider.id)
