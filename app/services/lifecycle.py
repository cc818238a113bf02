"""Application lifecycle: the permit status state machine, staff decisions, and the audit log.

All status rules live in TRANSITIONS and are applied by transition(). Every status change
publishes one notification: creation and owner edits go to staff, staff decisions go to
the owner. Database writes are plain commits with no row locking; two staff members
deciding the same application concurrently both succeed and the later write wins.
"""

import logging
from typing import NamedTuple, Protocol

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import Application, Document, StaffAction, User
from app.models.application import (
    PAYMENT_NOT_PAID,
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_PERMIT_ISSUED,
    STATUS_REJECTED,
)
from app.models.user import ROLE_ADMIN, ROLE_OWNER, ROLE_STAFF
from app.schemas.application import ApplicationCreate, ApplicationUpdate
from app.services.errors import (
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    PreconditionError,
)
from app.services.notifications import Notification, NotificationDispatcher

logger = logging.getLogger(__name__)

ACTION_SUBMIT = "submit"
ACTION_APPROVE = "approve"
ACTION_REJECT = "reject"
ACTION_EDIT = "edit"
ACTION_PAY = "pay"

# Status a notification reports for a brand-new application.
NEW_APPLICATION_STATUS = "new"


class Transition(NamedTuple):
    """One row of the state machine. sources=None means any existing status."""

    roles: frozenset[str]
    sources: frozenset[str | None] | None
    target: str


_DECIDABLE = frozenset({STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED})

TRANSITIONS: dict[str, Transition] = {
    ACTION_SUBMIT: Transition(frozenset({ROLE_OWNER}), frozenset({None}), STATUS_PENDING),
    ACTION_APPROVE: Transition(frozenset({ROLE_STAFF, ROLE_ADMIN}), _DECIDABLE, STATUS_APPROVED),
    ACTION_REJECT: Transition(frozenset({ROLE_STAFF, ROLE_ADMIN}), _DECIDABLE, STATUS_REJECTED),
    ACTION_EDIT: Transition(frozenset({ROLE_OWNER}), None, STATUS_PENDING),
    ACTION_PAY: Transition(
        frozenset({ROLE_OWNER, ROLE_STAFF, ROLE_ADMIN}),
        frozenset({STATUS_APPROVED}),
        STATUS_PERMIT_ISSUED,
    ),
}

# Staff decision status (request body) -> state machine action.
DECISIONS = {STATUS_APPROVED: ACTION_APPROVE, STATUS_REJECTED: ACTION_REJECT}


class Actor(Protocol):
    id: int
    role: str


def transition(current: str | None, action: str, actor_role: str) -> str:
    """
    Return the status that results from applying action to an application in status current.

    current is None for an application that does not exist yet (submit).
    Raises PermissionDeniedError when the role may not perform the action and
    InvalidTransitionError when the current status does not allow it.
    """
    rule = TRANSITIONS.get(action)
    if rule is None:
        raise PreconditionError(f"Unknown action {action!r}.")
    if actor_role not in rule.roles:
        raise PermissionDeniedError(f"Role '{actor_role}' may not {action} applications.")
    allowed = current is not None if rule.sources is None else current in rule.sources
    if not allowed:
        if current is None:
            raise InvalidTransitionError(
                f"Cannot {action} an application that does not exist.", current, action
            )
        raise InvalidTransitionError(
            f"Cannot {action} an application with status '{current}'.", current, action
        )
    return rule.target


def load_application(db: Session, application_id: int) -> Application:
    application = db.query(Application).filter(Application.id == application_id).first()
    if application is None:
        raise NotFoundError("Application not found")
    return application


def check_access(actor: Actor, application: Application) -> None:
    """Owners may only touch their own applications; staff and admins may touch any."""
    if actor.role == ROLE_OWNER and application.user_id != actor.id:
        raise PermissionDeniedError("Unauthorized")


async def create_application(
    db: Session,
    notifier: NotificationDispatcher,
    actor: Actor,
    data: ApplicationCreate,
) -> Application:
    """Persist a new pending application for the calling owner and alert staff."""
    status = transition(None, ACTION_SUBMIT, actor.role)
    application = Application(
        user_id=actor.id,
        business_name=data.business_name,
        business_type=data.business_type,
        address=data.address,
        barangay_clearance=data.barangay_clearance,
        dti_certificate=data.dti_certificate,
        lease_contract=data.lease_contract,
        status=status,
        fee=0,
        payment_status=PAYMENT_NOT_PAID,
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    logger.info(
        "Application submitted",
        extra={"application_id": application.id, "owner_id": actor.id},
    )

    await notifier.notify_staff(
        Notification(
            message=f"New application submitted: {application.business_name}",
            application_id=application.id,
            status=NEW_APPLICATION_STATUS,
        )
    )
    return application


def list_applications(db: Session, actor: Actor) -> list[tuple[Application, str]]:
    """Owners see their own applications; staff and admins see all. Newest first."""
    query = db.query(Application, User.name).join(User, Application.user_id == User.id)
    if actor.role == ROLE_OWNER:
        query = query.filter(Application.user_id == actor.id)
    rows = query.order_by(Application.created_at.desc(), Application.id.desc()).all()
    return [(application, owner_name) for application, owner_name in rows]


def get_application(db: Session, actor: Actor, application_id: int) -> Application:
    application = load_application(db, application_id)
    check_access(actor, application)
    return application


async def update_application(
    db: Session,
    notifier: NotificationDispatcher,
    actor: Actor,
    application_id: int,
    data: ApplicationUpdate,
) -> Application:
    """
    Edit application details.

    An owner edit always sends the application back to pending, whatever its status.
    If a permit had been issued, the payment status and permit reference are cleared
    with it. Staff/admin edits keep the status and may adjust the fee.
    """
    application = load_application(db, application_id)
    check_access(actor, application)

    application.business_name = data.business_name
    application.business_type = data.business_type
    application.address = data.address
    if data.barangay_clearance is not None:
        application.barangay_clearance = data.barangay_clearance
    if data.dti_certificate is not None:
        application.dti_certificate = data.dti_certificate
    if data.lease_contract is not None:
        application.lease_contract = data.lease_contract

    resubmitted = actor.role == ROLE_OWNER
    if resubmitted:
        previous = application.status
        application.status = transition(previous, ACTION_EDIT, actor.role)
        if previous == STATUS_PERMIT_ISSUED:
            application.payment_status = PAYMENT_NOT_PAID
            application.permit_file = None
    elif data.fee is not None:
        application.fee = data.fee

    application.updated_at = func.now()
    db.commit()
    db.refresh(application)
    logger.info(
        "Application updated",
        extra={
            "application_id": application.id,
            "actor_id": actor.id,
            "status": application.status,
        },
    )

    if resubmitted:
        await notifier.notify_staff(
            Notification(
                message=f'Application "{application.business_name}" was updated and set to pending.',
                application_id=application.id,
                status=STATUS_PENDING,
            )
        )
    return application


async def decide_application(
    db: Session,
    notifier: NotificationDispatcher,
    actor: Actor,
    application_id: int,
    status: str,
    fee: float | None = None,
    remarks: str | None = None,
) -> Application:
    """
    Apply a staff decision: approve (fee required, non-negative) or reject (remarks required).

    Appends exactly one StaffAction for the acting staff member and notifies the owner.
    The status update and the audit insert are committed separately.
    """
    action = DECISIONS.get(status)
    if action is None:
        raise PreconditionError("status must be 'approved' or 'rejected'.")
    remarks = remarks.strip() if remarks and remarks.strip() else None
    if action == ACTION_APPROVE and (fee is None or fee < 0):
        raise PreconditionError("A non-negative fee is required to approve an application.")
    if action == ACTION_REJECT and remarks is None:
        raise PreconditionError("Remarks are required to reject an application.")

    application = load_application(db, application_id)
    new_status = transition(application.status, action, actor.role)

    application.status = new_status
    if action == ACTION_APPROVE:
        application.fee = fee
    application.updated_at = func.now()
    db.commit()

    db.add(
        StaffAction(
            staff_id=actor.id,
            application_id=application.id,
            action=new_status,
            remarks=remarks,
        )
    )
    db.commit()
    db.refresh(application)
    logger.info(
        "Application decided",
        extra={
            "application_id": application.id,
            "staff_id": actor.id,
            "status": new_status,
        },
    )

    await notifier.notify_owner(
        application.user_id,
        Notification(
            message=(
                f'Your application "{application.business_name}" status has been '
                f"updated to {new_status}."
            ),
            application_id=application.id,
            status=new_status,
            fee=fee if action == ACTION_APPROVE else None,
            remarks=remarks,
        ),
    )
    return application


def delete_application(db: Session, actor: Actor, application_id: int) -> None:
    """Delete in any status. Owners may delete only their own applications."""
    application = load_application(db, application_id)
    check_access(actor, application)
    db.delete(application)
    db.commit()
    logger.info(
        "Application deleted",
        extra={"application_id": application_id, "actor_id": actor.id},
    )


def list_staff_actions(db: Session, application_id: int) -> list[tuple[StaffAction, str]]:
    """Audit trail for one application with staff names, newest first."""
    load_application(db, application_id)
    rows = (
        db.query(StaffAction, User.name)
        .join(User, StaffAction.staff_id == User.id)
        .filter(StaffAction.application_id == application_id)
        .order_by(StaffAction.created_at.desc(), StaffAction.id.desc())
        .all()
    )
    return [(action, staff_name) for action, staff_name in rows]


def list_documents(db: Session, actor: Actor, application_id: int) -> list[Document]:
    application = get_application(db, actor, application_id)
    return (
        db.query(Document)
        .filter(Document.application_id == application.id)
        .order_by(Document.uploaded_at.desc(), Document.id.desc())
        .all()
    )


def add_document(
    db: Session,
    actor: Actor,
    application_id: int,
    file_name: str,
    file_path: str,
) -> Document:
    """Attach a supplementary document reference to an application."""
    application = get_application(db, actor, application_id)
    document = Document(
        application_id=application.id,
        file_name=file_name,
        file_path=file_path,
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    return document
