from sqlalchemy import Connection

from pragatibook.repositories.base import OTPRepository, UserRepository


def get_user_repository(conn: Connection) -> UserRepository:
    from pragatibook.repositories.sqlalchemy import SQLAlchemyUserRepository

    return SQLAlchemyUserRepository(conn)


def get_otp_repository(conn: Connection) -> OTPRepository:
    from pragatibook.repositories.sqlalchemy import SQLAlchemyOTPRepository

    return SQLAlchemyOTPRepository(conn)
