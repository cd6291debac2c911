import logging

from starlette.background import BackgroundTasks

from vortex_auth.api.utils.jwt import JWTManager
from vortex_auth.app.repositories.errors import ConflictError, StoreError
from vortex_auth.app.services.email_dispatcher import EmailDispatcher, deliver_quietly
from vortex_auth.app.services.password_hasher import PasswordHasher, PasswordHashError
from vortex_auth.app.services.unit_of_work import UnitOfWork
from vortex_auth.app.use_cases.errors import EMAIL_EXISTS, USER_EXISTS, backend_error, conflict_error
from vortex_auth.domain.entities import User
from vortex_auth.domain.result import Result, Return
from .dtos import AuthResponse, RegisterCommand, UserInfo
from .sessions import new_session

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Register Use Case

    Command/Response Pattern:
    - Input: RegisterCommand (validated business intent)
    - Output: Result[AuthResponse] (token, audit session id, user projection)

    Business Logic:
    1. Reject a taken username (USER_EXISTS)
    2. Reject a taken email when one is given (EMAIL_EXISTS)
    3. Hash password with bcrypt
    4. Create User; a unique violation from a concurrent insert maps to
       USER_EXISTS / EMAIL_EXISTS by the conflicting column
    5. Record an audit Session and commit
    6. Mint the bearer token
    7. Queue the welcome email; delivery failures never fail registration
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: PasswordHasher,
        jwt_manager: JWTManager,
        mailer: EmailDispatcher,
        background: BackgroundTasks,
    ):
        self.uow = uow
        self.hasher = hasher
        self.jwt_manager = jwt_manager
        self.mailer = mailer
        self.background = background

    async def execute(self, command: RegisterCommand) -> Result[AuthResponse]:
        email = command.email or None

        async with self.uow:
            try:
                if await self.uow.users.get_by_username(command.username) is not None:
                    return Return.err(USER_EXISTS)

                if email and await self.uow.users.get_by_email(email) is not None:
                    return Return.err(EMAIL_EXISTS)
            except StoreError as exc:
                return Return.err(backend_error("Register", exc))

            try:
                password_hash = self.hasher.hash(command.password)
            except PasswordHashError as exc:
                return Return.err(backend_error("Register", exc))

            user = User(username=command.username, email=email, password_hash=password_hash)

            try:
                user = await self.uow.users.create(user)
                session = await self.uow.sessions.create(new_session(user.id, self.jwt_manager))
                await self.uow.commit()
            except ConflictError as exc:
                logger.info(f"Registration lost a uniqueness race on {exc.field}")
                return Return.err(conflict_error(exc.field))
            except StoreError as exc:
                return Return.err(backend_error("Register", exc))

        token = self.jwt_manager.generate_jwt(user.id, user.username)

        if email:
            self.background.add_task(deliver_quietly, self.mailer.send_welcome, email, user.username)

        logger.info(f"User registered: {user.id}")
        return Return.ok(
            AuthResponse(token=token, session_id=session.id, user=UserInfo.from_entity(user))
        )
