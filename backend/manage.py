import asyncio
import typer
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

import casebook.db_models # noqa: F401

from casebook.database import async_session_factory, engine
from casebook.exceptions import AppError
from casebook.users.schema import UserRegister
from casebook.users.service import create_user, get_user_by_email, set_role
from casebook.users.models import User as UserModel, UserRole # 타입 힌트를 위해 임포트

cli = typer.Typer()

async def create_admin_runner(name: str, email: str, password: str, db: AsyncSession):
    """비동기 로직을 실행하는 실제 러너 함수"""
    print("--- Admin User Creation ---")
    try:
        # 가입 API 와 같은 검증 규칙 적용
        user_data = UserRegister(name=name, email=email, password=password, confirm_password=password)

        print(f"Creating admin user '{email}'...")
        admin_user: UserModel = await create_user(
            db,
            name=user_data.name,
            email=user_data.email,
            password=user_data.password,
            role=UserRole.ADMIN.value,
        )

        print("\n✅ Admin user created successfully!")
        print(f"   ID: {admin_user.id}")
        print(f"   Email: {admin_user.email}")
        print(f"   Role: {admin_user.role}")
    except ValidationError as e:
        print("\n❌ Error creating admin user: invalid input")
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"]) or "input"
            print(f"   {field}: {err['msg']}")
        raise typer.Exit(code=1)
    except AppError as e:
        print(f"\n❌ Error creating admin user: {e.detail}")
        raise typer.Exit(code=1)
    finally:
        print("--- Task Finished ---")


async def grant_role_runner(email: str, role: UserRole, db: AsyncSession):
    user = await get_user_by_email(email, db)
    if user is None:
        print(f"❌ User not found: {email}")
        raise typer.Exit(code=1)
    user = await set_role(db, user.id, role.value)
    print(f"✅ {user.email} is now '{user.role}'")


def _run(runner):
    async def main():
        try:
            async with async_session_factory() as session:
                await runner(session)
        finally:
            await engine.dispose()

    asyncio.run(main())


@cli.command(name="create-admin")
def createadmin(
    name: str = typer.Option(..., "--name", "-n", help="Admin's full name."),
    email: str = typer.Option(..., "--email", "-e", help="Admin's email address."),
    password: str = typer.Option(..., "--password", "-p", help="Admin's secure password."),
):
    """
    Creates a new user with 'admin' privileges in the database.
    """
    _run(lambda session: create_admin_runner(name=name, email=email, password=password, db=session))


@cli.command(name="grant-author")
def grant_author(
    email: str = typer.Option(..., "--email", "-e", help="Email of an existing user."),
    revoke: bool = typer.Option(False, "--revoke", help="Set the role back to 'user'."),
):
    """
    Gives an existing user the 'author' role so they can publish blogs and case studies.
    """
    role = UserRole.USER if revoke else UserRole.AUTHOR
    _run(lambda session: grant_role_runner(email=email, role=role, db=session))


if __name__ == "__main__":
    cli()
