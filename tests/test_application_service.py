"""
Tests for the approval pipeline and the rejected-application deletion cascade.
"""

from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from database.models import ApplicationStatus, Brand, DesignerApplication, Profile, ProfileRole
from services.errors import InvalidRequest, NotFound, PersistenceError
from services.results import StepResult


# ============================================================================
# Status transitions
# ============================================================================

def test_invalid_status_rejected_before_any_io(review_service, make_application):
    application = make_application()

    with pytest.raises(InvalidRequest):
        review_service.update_status(application.id, "archived")

    assert application.status == ApplicationStatus.NEW


def test_unknown_application_is_not_found(review_service):
    with pytest.raises(NotFound):
        review_service.update_status("missing", ApplicationStatus.REVIEWING)


def test_reviewing_sets_review_timestamp_and_notes(review_service, make_application, identity_provider):
    application = make_application()

    outcome = review_service.update_status(application.id, "reviewing", notes="Looking", reviewer_id="admin-1")

    assert outcome.success
    assert outcome.application.status == ApplicationStatus.REVIEWING
    assert outcome.application.notes == "Looking"
    assert outcome.application.reviewed_at is not None
    assert outcome.application.reviewed_by == "admin-1"
    assert outcome.brand is None
    assert identity_provider.calls == []


def test_back_to_new_leaves_reviewed_at_unset(review_service, make_application):
    application = make_application()

    outcome = review_service.update_status(application.id, ApplicationStatus.NEW)

    assert outcome.application.reviewed_at is None


def test_status_write_failure_is_persistence_error(review_service, make_application, db_session):
    application = make_application()

    with patch.object(db_session, "commit", side_effect=OperationalError("UPDATE", {}, Exception("down"))):
        with pytest.raises(PersistenceError):
            review_service.update_status(application.id, ApplicationStatus.APPROVED)


def test_approval_provisions_everything(review_service, make_application, db_session, email_client):
    application = make_application()

    outcome = review_service.update_status(application.id, ApplicationStatus.APPROVED)

    assert outcome.success
    assert outcome.warning is None
    assert outcome.brand_created is True
    assert outcome.user_created is True

    brand = db_session.get(Brand, outcome.brand["id"])
    assert brand.name == "Aso Oke Co"
    assert brand.is_verified is True

    profile = db_session.get(Profile, outcome.user["id"])
    assert profile.role == ProfileRole.BRAND_ADMIN
    assert profile.owned_brands == [brand.id]

    assert outcome.temporary_password
    assert outcome.password_reset_link
    assert len(email_client.sent) == 1
    assert "type=recovery" in email_client.sent[0]["html"]
    assert outcome.temporary_password not in email_client.sent[0]["html"]


def test_retried_approval_does_not_duplicate_brand(review_service, make_application, db_session, identity_provider):
    application = make_application()

    first = review_service.update_status(application.id, ApplicationStatus.APPROVED)
    second = review_service.update_status(application.id, ApplicationStatus.APPROVED)

    assert db_session.query(Brand).count() == 1
    assert second.brand["id"] == first.brand["id"]
    assert second.brand["created"] is False
    assert db_session.get(Brand, first.brand["id"]).is_verified is True
    assert db_session.get(Profile, first.user["id"]).owned_brands == [first.brand["id"]]
    assert second.user["id"] == first.user["id"]
    assert second.user["created"] is False
    assert second.temporary_password is None
    assert second.note
    assert [c[0] for c in identity_provider.calls].count("create") == 1


def test_second_brand_for_existing_owner(review_service, make_application, make_profile, db_session):
    owner = make_profile(email="d@x.com", role=ProfileRole.BRAND_ADMIN, owned_brands=["brand-a"])
    application = make_application(brand_name="Second Label")

    outcome = review_service.update_status(application.id, ApplicationStatus.APPROVED)

    db_session.refresh(owner)
    assert outcome.user["id"] == owner.id
    assert owner.owned_brands == ["brand-a", outcome.brand["id"]]


def test_brand_creation_failure_stops_pipeline(review_service, make_application, identity_provider, email_client):
    application = make_application()
    review_service.brands.provision = MagicMock(return_value=StepResult.failure("brand", "insert failed"))

    outcome = review_service.update_status(application.id, ApplicationStatus.APPROVED)

    assert outcome.success
    assert outcome.application.status == ApplicationStatus.APPROVED
    assert outcome.brand_created is False
    assert "brand could not be created" in outcome.warning
    assert identity_provider.calls == []
    assert email_client.sent == []


def test_identity_creation_failure_keeps_brand(review_service, make_application, identity_provider, db_session, email_client):
    identity_provider.fail_create = True
    application = make_application()

    outcome = review_service.update_status(application.id, ApplicationStatus.APPROVED)

    assert outcome.success
    assert outcome.user_created is False
    assert outcome.brand["name"] == "Aso Oke Co"
    assert "user account could not be created" in outcome.warning
    brand = db_session.get(Brand, outcome.brand["id"])
    assert brand.is_verified is False
    assert db_session.query(Profile).count() == 0
    assert email_client.sent == []


def test_reset_link_failure_surfaces_temporary_password(review_service, make_application, identity_provider):
    identity_provider.fail_link = True
    application = make_application()

    outcome = review_service.update_status(application.id, ApplicationStatus.APPROVED)

    assert outcome.password_reset_link is None
    assert outcome.temporary_password
    assert "temporary password" in outcome.warning


def test_profile_failure_is_reported_and_brand_stays_unverified(review_service, make_application, db_session):
    application = make_application()
    review_service.profiles.merge = MagicMock(return_value=StepResult.failure("profile", "denied", fatal=False))

    outcome = review_service.update_status(application.id, ApplicationStatus.APPROVED)

    assert outcome.success
    assert outcome.user_created is True
    assert "ownership could not be linked" in outcome.warning
    assert db_session.get(Brand, outcome.brand["id"]).is_verified is False


def test_verification_failure_is_a_warning(review_service, make_application):
    application = make_application()
    review_service.brands.verify = MagicMock(return_value=StepResult.failure("verify", "boom", fatal=False))

    outcome = review_service.update_status(application.id, ApplicationStatus.APPROVED)

    assert outcome.success
    assert "verified" in outcome.warning


def test_email_failure_never_fails_approval(review_service, make_application, email_client):
    email_client.fail = True
    application = make_application()

    outcome = review_service.update_status(application.id, ApplicationStatus.APPROVED)

    assert outcome.success
    assert outcome.warning is None


def test_rejection_only_notifies(review_service, make_application, db_session, identity_provider, email_client):
    application = make_application()

    outcome = review_service.update_status(application.id, "rejected", notes="Incomplete portfolio")

    assert outcome.success
    assert outcome.brand is None and outcome.user is None
    assert db_session.query(Brand).count() == 0
    assert db_session.query(Profile).count() == 0
    assert identity_provider.calls == []
    assert "Incomplete portfolio" in email_client.sent[0]["html"]


# ============================================================================
# Deletion cascade
# ============================================================================

def _brand_id(db_session, name="Aso Oke Co", email="d@x.com", verified=False):
    brand = Brand(name=name, contact_email=email, is_verified=verified)
    db_session.add(brand)
    db_session.commit()
    return brand.id


def test_blank_id_is_invalid(review_service):
    with pytest.raises(InvalidRequest):
        review_service.delete_application("   ")


def test_delete_missing_application(review_service):
    with pytest.raises(NotFound):
        review_service.delete_application("missing")


def test_delete_rejected_removes_orphan_brand(review_service, make_application, db_session):
    brand_id = _brand_id(db_session)
    application = make_application(status=ApplicationStatus.REJECTED)

    outcome = review_service.delete_application(application.id)

    assert outcome.brand_deleted is True
    assert outcome.rows_deleted == 1
    assert outcome.deleted_application["brand_name"] == "Aso Oke Co"
    assert db_session.get(Brand, brand_id) is None
    assert db_session.query(DesignerApplication).count() == 0


def test_brand_kept_while_sibling_still_pending(review_service, make_application, db_session):
    brand_id = _brand_id(db_session)
    rejected = make_application(status=ApplicationStatus.REJECTED)
    sibling = make_application(status=ApplicationStatus.REVIEWING)

    first = review_service.delete_application(rejected.id)
    assert first.brand_deleted is False
    assert db_session.get(Brand, brand_id) is not None

    review_service.update_status(sibling.id, ApplicationStatus.REJECTED)
    second = review_service.delete_application(sibling.id)
    assert second.brand_deleted is True
    assert db_session.get(Brand, brand_id) is None


def test_approved_sibling_does_not_protect_brand(review_service, make_application, db_session):
    brand_id = _brand_id(db_session)
    rejected = make_application(status=ApplicationStatus.REJECTED)
    make_application(status=ApplicationStatus.APPROVED)

    outcome = review_service.delete_application(rejected.id)

    assert outcome.brand_deleted is True
    assert db_session.get(Brand, brand_id) is None


def test_non_rejected_application_never_cascades(review_service, make_application, db_session):
    brand_id = _brand_id(db_session)
    application = make_application(status=ApplicationStatus.REVIEWING)

    outcome = review_service.delete_application(application.id)

    assert outcome.brand_deleted is False
    assert db_session.get(Brand, brand_id) is not None


def test_verified_brand_survives_cascade(review_service, make_application, db_session):
    brand_id = _brand_id(db_session, verified=True)
    application = make_application(status=ApplicationStatus.REJECTED)

    outcome = review_service.delete_application(application.id)

    assert outcome.brand_deleted is False
    assert db_session.get(Brand, brand_id) is not None


# ============================================================================
# Listing and submission
# ============================================================================

def test_list_newest_first_with_filter(review_service, make_application):
    now = datetime.utcnow()
    old = make_application(brand_name="Old", created_at=now - timedelta(days=2))
    new = make_application(brand_name="New", created_at=now, status=ApplicationStatus.REVIEWING)

    assert [a.id for a in review_service.list_applications()] == [new.id, old.id]
    assert [a.id for a in review_service.list_applications(ApplicationStatus.REVIEWING)] == [new.id]


def test_submission_reserves_unverified_brand(review_service, db_session):
    application = review_service.submit_application(
        brand_name="Aso Oke Co",
        designer_name="Ada Designer",
        email="d@x.com",
        location="Lagos",
        category="Bridal",
        description="Handwoven",
    )

    assert application.status == ApplicationStatus.NEW
    brand = db_session.query(Brand).one()
    assert brand.is_verified is False
    assert brand.contact_email == "d@x.com"

    # Approval later reuses the same brand
    outcome = review_service.update_status(application.id, ApplicationStatus.APPROVED)
    assert outcome.brand["id"] == brand.id
    assert outcome.brand["created"] is False
