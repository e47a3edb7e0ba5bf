"""ScenarioService — replay a scripted list of operations against a workspace.

A scenario is a list of step dicts, each naming its operation in ``op``::

    [
        {"op": "register", "name": "Asha", "email": "asha@example.com",
         "password": "pw", "role": "manager"},
        {"op": "register", "name": "Ravi", "email": "ravi@example.com",
         "password": "pw", "role": "builder"},
        {"op": "create_project", "actor": "P1", "name": "Bridge",
         "start_date": "2025-01-01", "end_date": "2025-12-31",
         "client": {"name": "City", "email": "c@example.com", "phone": "555"},
         "builder_id": "B1"},
        {"op": "update_status", "actor": "B1", "project_id": 1, "status": "IN_PROGRESS"},
        {"op": "delete_project", "actor": "P1", "project_id": 1}
    ]

The replayer plays the part of the interactive front end: it parses and
checks input, confirms that actors are registered in the role they act in,
and refuses same-day project schedules before handing well-formed values
to the account service and the coordinator.

Steps run in order. Replay stops at the first failing step unless
*partial* is set, in which case every step runs and failures are collected.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Literal, Self

import structlog
from pydantic import (
    BaseModel,
    BeforeValidator,
    Field,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from builderfolio.domain.errors import InvalidCredentialsError, UserNotFoundError
from builderfolio.domain.ids import Role, parse_role, validate_user_id
from builderfolio.domain.lifecycle import ProjectStatus, parse_status
from builderfolio.services.accounts import AccountService
from builderfolio.services.base import BaseService
from builderfolio.services.coordinator import ProjectCoordinator
from builderfolio.services.integrity import IntegrityService
from builderfolio.services.result import ServiceError, ServiceResult

logger = structlog.get_logger(__name__)


def _coerce_status(value: Any) -> Any:
    return parse_status(value) if isinstance(value, str) else value


def _coerce_role(value: Any) -> Any:
    return parse_role(value) if isinstance(value, str) else value


StatusToken = Annotated[ProjectStatus, BeforeValidator(_coerce_status)]
RoleToken = Annotated[Role, BeforeValidator(_coerce_role)]


# ---------------------------------------------------------------------------
# Step models
# ---------------------------------------------------------------------------


class _Step(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}


class RegisterStep(_Step):
    op: Literal["register"]
    name: str
    email: str
    phone: str = ""
    experience: int = 0
    password: str
    role: RoleToken


class LoginStep(_Step):
    op: Literal["login"]
    user_id: str
    password: str


class ClientInput(_Step):
    name: str
    email: str
    phone: str


class CreateProjectStep(_Step):
    op: Literal["create_project"]
    actor: str
    name: str
    description: str = ""
    start_date: date
    end_date: date
    client: ClientInput
    status: StatusToken = ProjectStatus.UPCOMING
    builder_id: str

    @model_validator(mode="after")
    def _end_after_start(self) -> Self:
        if self.end_date == self.start_date:
            raise ValueError("Start date and end date cannot be the same")
        return self


class UpdateStatusStep(_Step):
    op: Literal["update_status"]
    actor: str
    project_id: int
    status: StatusToken


class UpdateDetailsStep(_Step):
    op: Literal["update_details"]
    actor: str
    project_id: int
    name: str | None = None
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None


class DeleteProjectStep(_Step):
    op: Literal["delete_project"]
    actor: str
    project_id: int


class ListProjectsStep(_Step):
    op: Literal["list_projects"]
    holder: str
    role: RoleToken


class CheckStep(_Step):
    op: Literal["check"]


class FixStep(_Step):
    op: Literal["fix"]


Step = Annotated[
    RegisterStep
    | LoginStep
    | CreateProjectStep
    | UpdateStatusStep
    | UpdateDetailsStep
    | DeleteProjectStep
    | ListProjectsStep
    | CheckStep
    | FixStep,
    Field(discriminator="op"),
]

_STEP_ADAPTER: TypeAdapter[Any] = TypeAdapter(Step)


class StepFailed(Exception):
    """A scenario step could not be carried out."""


def _describe(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" if err["loc"] else err["msg"]
            for err in exc.errors()
        )
    return str(exc)


# ---------------------------------------------------------------------------
# ScenarioService
# ---------------------------------------------------------------------------


class ScenarioService(BaseService):
    """Runs scripted operations through the account and project services."""

    def replay(self, steps: list[dict[str, Any]], *, partial: bool = False) -> ServiceResult:
        """Execute *steps* in order and report every outcome.

        All steps must succeed unless *partial* is True.
        """
        op = "run"
        outcomes: list[dict[str, Any]] = []
        errors: list[dict[str, Any]] = []

        for index, raw in enumerate(steps):
            step_op = str(raw.get("op", "?")) if isinstance(raw, dict) else "?"
            try:
                step = _STEP_ADAPTER.validate_python(raw)
                detail = self._execute(step)
            except (StepFailed, ValueError) as exc:
                message = _describe(exc)
                logger.info("scenario.step_failed", index=index, op=step_op, error=message)
                outcomes.append({"index": index, "op": step_op, "ok": False, "error": message})
                errors.append({"index": index, "op": step_op, "error": message})
                if not partial:
                    break
                continue
            outcomes.append({"index": index, "op": step_op, "ok": True, **detail})

        data = {
            "steps": outcomes,
            "completed": sum(1 for o in outcomes if o["ok"]),
            "errors": errors,
        }
        if errors and not partial:
            first = errors[0]
            return ServiceResult(
                ok=False,
                op=op,
                data=data,
                error=ServiceError(
                    code="STEP_FAILED",
                    message=f"Step {first['index']} ({first['op']}) failed: {first['error']}",
                    detail={"index": first["index"]},
                ),
            )

        warnings = [f"Step {e['index']} ({e['op']}) failed: {e['error']}" for e in errors]
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    # ------------------------------------------------------------------
    # Step execution
    # ------------------------------------------------------------------

    def _execute(self, step: Any) -> dict[str, Any]:
        handler = getattr(self, f"_run_{step.op}")
        return handler(step)

    def _require_role(self, user_id: str, role: Role) -> None:
        if not validate_user_id(user_id, role):
            raise StepFailed(f"User {user_id} is not a {role.value}")
        try:
            user = AccountService(self._workspace).fetch_user(user_id)
        except UserNotFoundError as exc:
            raise StepFailed(str(exc)) from exc
        if user.role is not role:
            raise StepFailed(f"User {user_id} is not a {role.value}")

    def _run_register(self, step: RegisterStep) -> dict[str, Any]:
        result = AccountService(self._workspace).register(
            step.name,
            step.email,
            step.phone,
            step.experience,
            step.password,
            step.role,
        )
        if not result.ok:
            raise StepFailed(result.error.message if result.error else "Registration failed")
        return {"user_id": result.data["id"], "role": result.data["role"]}

    def _run_login(self, step: LoginStep) -> dict[str, Any]:
        try:
            user = AccountService(self._workspace).login(step.user_id, step.password)
        except (UserNotFoundError, InvalidCredentialsError) as exc:
            raise StepFailed(str(exc)) from exc
        return {"user_id": user.id, "role": str(user.role)}

    def _run_create_project(self, step: CreateProjectStep) -> dict[str, Any]:
        self._require_role(step.actor, Role.MANAGER)
        self._require_role(step.builder_id, Role.BUILDER)
        coordinator = ProjectCoordinator(self._workspace)
        client = coordinator.new_client(step.client.name, step.client.email, step.client.phone)
        project = coordinator.create_project(
            step.name,
            step.description,
            step.start_date,
            step.end_date,
            client,
            step.status,
            step.builder_id,
            step.actor,
        )
        return {"project": project.summary()}

    def _run_update_status(self, step: UpdateStatusStep) -> dict[str, Any]:
        coordinator = ProjectCoordinator(self._workspace)
        if not coordinator.update_status(step.actor, step.project_id, step.status):
            raise StepFailed(f"Cannot update status of project {step.project_id} as {step.actor}")
        return {"project_id": step.project_id, "status": str(step.status)}

    def _run_update_details(self, step: UpdateDetailsStep) -> dict[str, Any]:
        coordinator = ProjectCoordinator(self._workspace)
        updated = coordinator.update_details(
            step.actor,
            step.project_id,
            name=step.name,
            description=step.description,
            start_date=step.start_date,
            end_date=step.end_date,
        )
        if not updated:
            raise StepFailed(f"Cannot update project {step.project_id} as {step.actor}")
        project = coordinator.find_project(step.project_id)
        if project is None:
            raise StepFailed(f"Project {step.project_id} disappeared during update")
        return {"project": project.summary()}

    def _run_delete_project(self, step: DeleteProjectStep) -> dict[str, Any]:
        coordinator = ProjectCoordinator(self._workspace)
        if not coordinator.delete_project(step.actor, step.project_id):
            raise StepFailed(f"Cannot delete project {step.project_id} as {step.actor}")
        return {"project_id": step.project_id}

    def _run_list_projects(self, step: ListProjectsStep) -> dict[str, Any]:
        projects = ProjectCoordinator(self._workspace).list_projects_for(step.holder, step.role)
        return {"items": [p.summary() for p in projects], "count": len(projects)}

    def _run_check(self, step: CheckStep) -> dict[str, Any]:
        result = IntegrityService(self._workspace).check()
        return dict(result.data)

    def _run_fix(self, step: FixStep) -> dict[str, Any]:
        result = IntegrityService(self._workspace).fix()
        return dict(result.data)
