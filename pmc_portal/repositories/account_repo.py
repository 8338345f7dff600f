from sqlalchemy.orm import Session
from sqlalchemy import func, select
from pmc_portal.models.account_model import Account
from pmc_portal.models.enums import AccountRole


def get_account_by_email(db: Session, email: str) -> Account | None:
    stmt = select(Account).where(func.lower(Account.email) == email.lower())
    return db.execute(stmt).scalars().first()


def get_account_by_id(db: Session, account_id: int) -> Account | None:
    stmt = select(Account).where(Account.account_id == account_id)
    return db.execute(stmt).scalars().first()


def create_account(
    db: Session,
    email: str,
    role: AccountRole,
    name: str | None = None,
    password_hash: str | None = None,
) -> Account:
    account = Account(
        email=email.lower(),
        name=name,
        role=role,
        password_hash=password_hash,
        is_active=True,
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def list_accounts_by_roles(db: Session, roles: list[AccountRole]) -> list[Account]:
    stmt = select(Account).where(Account.role.in_(roles)).order_by(Account.account_id)
    return list(db.execute(stmt).scalars().all())
