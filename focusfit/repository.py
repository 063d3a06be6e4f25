"""
Persistence adapter for profiles, plans and dopamine wins.

``PlanRepository`` wraps a SQLAlchemy session factory. Every public method
runs in its own transaction. Storage errors surface as ``TransportFailure``
and missing records as the ``*NotFound`` lookup errors.

Real-time updates are push-based: ``subscribe_to_current_plan`` registers a
callback that receives the user's current plan immediately, then again each
time that plan is replaced or one of its tasks changes.
``subscribe_to_dopamine_wins`` does the same for the user's win list.
"""

from collections import defaultdict
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from focusfit.database import (
    DopamineWinRecord,
    FocusPlanRecord,
    UserRecord,
    init_database,
)
from focusfit.errors import PlanNotFound, ProfileNotFound, TaskNotFound, TransportFailure
from focusfit.schemas import (
    DietaryRestriction,
    DopamineWin,
    Hurdle,
    TaskType,
    UserContext,
    UserPreferences,
    UserProfile,
    WeeklyPlan,
    WinType,
    utc_now,
)

logger = structlog.get_logger(__name__)

PlanCallback = Callable[[Optional[WeeklyPlan]], None]
WinsCallback = Callable[[List[DopamineWin]], None]

RECENT_WINS_WINDOW = timedelta(days=7)

PROFILE_UPDATABLE_FIELDS = {
    "email",
    "adhd_hurdles",
    "dietary_restrictions",
    "current_plan_id",
    "preferences",
}


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite drops tzinfo; stored timestamps are always UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _profile_from_record(record: UserRecord) -> UserProfile:
    return UserProfile(
        id=record.id,
        email=record.email,
        adhd_hurdles=record.adhd_hurdles or [],
        dietary_restrictions=record.dietary_restrictions or [],
        current_plan_id=record.current_plan_id,
        preferences=UserPreferences.model_validate(record.preferences or {}),
        created_at=_as_utc(record.created_at),
        updated_at=_as_utc(record.updated_at),
    )


def _win_from_record(record: DopamineWinRecord) -> DopamineWin:
    return DopamineWin(
        id=str(record.id),
        user_id=record.user_id,
        win_type=record.win_type,
        title=record.title,
        description=record.description,
        timestamp=_as_utc(record.timestamp),
    )


class PlanRepository:
    """
    Stores FocusFit documents in a relational database.

    Args:
        session_factory: SQLAlchemy sessionmaker bound to an initialized engine
    """

    def __init__(self, session_factory):
        self._session_factory = session_factory
        self._plan_subscribers: Dict[str, List[PlanCallback]] = defaultdict(list)
        self._win_subscribers: Dict[str, List[WinsCallback]] = defaultdict(list)

    @classmethod
    def from_url(cls, database_url: str) -> "PlanRepository":
        """Create tables if needed and return a repository for the database."""
        return cls(init_database(database_url))

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Any]:
        try:
            with self._session_factory.begin() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error("persistence_failed", operation=operation, error=str(e))
            raise TransportFailure(
                f"Persistence call '{operation}' failed: {e}", operation=operation
            ) from e

    # ------------------------------------------------------------------
    # User profiles
    # ------------------------------------------------------------------

    def create_user_profile(
        self,
        user_id: str,
        email: str,
        adhd_hurdles: List[Hurdle],
        dietary_restrictions: List[DietaryRestriction],
    ) -> UserProfile:
        """
        Create (or overwrite) a user's profile.

        An empty restriction list is stored as ["none"].

        Raises:
            pydantic.ValidationError: If "none" is mixed with other restrictions
        """
        now = utc_now()
        profile = UserProfile(
            id=user_id,
            email=email,
            adhd_hurdles=adhd_hurdles,
            dietary_restrictions=dietary_restrictions or [DietaryRestriction.NONE],
            created_at=now,
            updated_at=now,
        )
        data = profile.model_dump(mode="json")

        with self._transaction("create_user_profile") as session:
            session.merge(
                UserRecord(
                    id=profile.id,
                    email=profile.email,
                    adhd_hurdles=data["adhd_hurdles"],
                    dietary_restrictions=data["dietary_restrictions"],
                    current_plan_id=None,
                    preferences=data["preferences"],
                    created_at=now,
                    updated_at=now,
                )
            )

        logger.info("user_profile_created", user_id=user_id)
        return profile

    def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        with self._transaction("get_user_profile") as session:
            record = session.get(UserRecord, user_id)
            return _profile_from_record(record) if record else None

    def update_user_profile(self, user_id: str, **updates: Any) -> UserProfile:
        """
        Apply partial updates to a profile and touch ``updated_at``.

        Args:
            user_id: Profile to update
            **updates: Any of email, adhd_hurdles, dietary_restrictions,
                current_plan_id, preferences

        Raises:
            ProfileNotFound: If the profile does not exist
            ValueError: If an unknown field is passed or the result is invalid
        """
        unknown = set(updates) - PROFILE_UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update profile fields: {sorted(unknown)}")

        with self._transaction("update_user_profile") as session:
            record = session.get(UserRecord, user_id)
            if record is None:
                raise ProfileNotFound(f"No profile for user '{user_id}'")

            current = _profile_from_record(record).model_dump()
            current.update(updates)
            current["updated_at"] = utc_now()
            profile = UserProfile.model_validate(current)
            data = profile.model_dump(mode="json")

            record.email = profile.email
            record.adhd_hurdles = data["adhd_hurdles"]
            record.dietary_restrictions = data["dietary_restrictions"]
            record.current_plan_id = profile.current_plan_id
            record.preferences = data["preferences"]
            record.updated_at = profile.updated_at

        return profile

    # ------------------------------------------------------------------
    # Plans
    # ------------------------------------------------------------------

    def save_plan(self, user_id: str, plan: WeeklyPlan) -> str:
        """
        Store a plan and make it the user's current plan.

        Returns:
            The stored plan id

        Raises:
            ProfileNotFound: If the user has no profile
        """
        stored = plan.model_copy(update={"user_id": user_id})
        now = utc_now()

        with self._transaction("save_plan") as session:
            user = session.get(UserRecord, user_id)
            if user is None:
                raise ProfileNotFound(f"No profile for user '{user_id}'")

            session.merge(
                FocusPlanRecord(
                    id=stored.id,
                    user_id=user_id,
                    week_number=stored.week_number,
                    provenance=stored.provenance.value,
                    plan_data=stored.to_payload(),
                    created_at=now,
                    updated_at=now,
                )
            )
            user.current_plan_id = stored.id
            user.updated_at = now

        logger.info("plan_saved", user_id=user_id, plan_id=stored.id)
        self._notify(user_id, stored)
        return stored.id

    def get_plan(self, plan_id: str) -> Optional[WeeklyPlan]:
        with self._transaction("get_plan") as session:
            record = session.get(FocusPlanRecord, plan_id)
            return WeeklyPlan.model_validate(record.plan_data) if record else None

    def get_current_plan_id(self, user_id: str) -> Optional[str]:
        with self._transaction("get_current_plan_id") as session:
            user = session.get(UserRecord, user_id)
            return user.current_plan_id if user else None

    def get_current_plan(self, user_id: str) -> Optional[WeeklyPlan]:
        """Return the user's current plan, or None if there is none."""
        plan_id = self.get_current_plan_id(user_id)
        if not plan_id:
            return None
        return self.get_plan(plan_id)

    def _subscribe(
        self,
        registry: Dict[str, List[Callable[[Any], None]]],
        user_id: str,
        callback: Callable[[Any], None],
        current: Any,
    ) -> Callable[[], None]:
        # Register only after the initial read and push succeed
        callback(current)
        registry[user_id].append(callback)

        def unsubscribe() -> None:
            callbacks = registry.get(user_id, [])
            if callback in callbacks:
                callbacks.remove(callback)
            if not callbacks:
                registry.pop(user_id, None)

        return unsubscribe

    def subscribe_to_current_plan(
        self, user_id: str, callback: PlanCallback
    ) -> Callable[[], None]:
        """
        Push the user's current plan to ``callback`` now and on every change.

        Returns:
            A function that removes the subscription
        """
        return self._subscribe(
            self._plan_subscribers, user_id, callback, self.get_current_plan(user_id)
        )

    def _notify(self, user_id: str, plan: Optional[WeeklyPlan]) -> None:
        for callback in list(self._plan_subscribers.get(user_id, [])):
            try:
                callback(plan)
            except Exception:
                logger.exception("plan_subscriber_failed", user_id=user_id)

    def update_task_status(
        self,
        user_id: str,
        plan_id: str,
        task_id: str,
        is_completed: bool,
        task_type: TaskType,
    ) -> WeeklyPlan:
        """
        Mark a task complete or incomplete.

        Completing a task that was not already complete records a dopamine
        win for the user.

        Raises:
            PlanNotFound: If the plan does not exist
            TaskNotFound: If the plan has no such task
        """
        task_type = TaskType(task_type)
        now = utc_now()

        with self._transaction("update_task_status") as session:
            record = session.get(FocusPlanRecord, plan_id)
            if record is None:
                raise PlanNotFound(f"Plan '{plan_id}' not found")

            plan = WeeklyPlan.model_validate(record.plan_data)
            task = plan.find_task(task_type, task_id)
            if task is None:
                raise TaskNotFound(f"No {task_type.value} task '{task_id}' in plan '{plan_id}'")

            newly_completed = is_completed and not task.is_completed
            task.is_completed = is_completed
            record.plan_data = plan.to_payload()
            record.updated_at = now

            if newly_completed:
                is_workout = task_type == TaskType.WORKOUTS
                session.add(
                    DopamineWinRecord(
                        user_id=user_id,
                        win_type=(WinType.WORKOUT if is_workout else WinType.MEAL).value,
                        title=task.title,
                        description=(
                            f"Completed {'workout' if is_workout else 'meal prep'}: {task.title}"
                        ),
                        timestamp=now,
                    )
                )

            owner_id = record.user_id
            owner = session.get(UserRecord, owner_id)
            is_current = owner is not None and owner.current_plan_id == plan_id

        if is_current:
            self._notify(owner_id, plan)
        if newly_completed:
            self._notify_wins(user_id)
        return plan

    # ------------------------------------------------------------------
    # Dopamine wins
    # ------------------------------------------------------------------

    def add_dopamine_win(self, user_id: str, win: DopamineWin) -> DopamineWin:
        with self._transaction("add_dopamine_win") as session:
            record = DopamineWinRecord(
                user_id=user_id,
                win_type=win.win_type.value,
                title=win.title,
                description=win.description,
                timestamp=win.timestamp,
            )
            session.add(record)
            session.flush()
            stored = _win_from_record(record)

        self._notify_wins(user_id)
        return stored

    def get_dopamine_wins(self, user_id: str) -> List[DopamineWin]:
        """Return the user's wins, newest first."""
        with self._transaction("get_dopamine_wins") as session:
            records = session.scalars(
                select(DopamineWinRecord)
                .where(DopamineWinRecord.user_id == user_id)
                .order_by(DopamineWinRecord.timestamp.desc(), DopamineWinRecord.id.desc())
            ).all()
            return [_win_from_record(r) for r in records]

    def subscribe_to_dopamine_wins(
        self, user_id: str, callback: WinsCallback
    ) -> Callable[[], None]:
        """
        Push the user's wins (newest first) to ``callback`` now and whenever
        a win is recorded.

        Returns:
            A function that removes the subscription
        """
        return self._subscribe(
            self._win_subscribers, user_id, callback, self.get_dopamine_wins(user_id)
        )

    def _notify_wins(self, user_id: str) -> None:
        callbacks = list(self._win_subscribers.get(user_id, []))
        if not callbacks:
            return

        try:
            wins = self.get_dopamine_wins(user_id)
        except TransportFailure:
            logger.exception("win_subscribers_not_notified", user_id=user_id)
            return

        for callback in callbacks:
            try:
                callback(wins)
            except Exception:
                logger.exception("win_subscriber_failed", user_id=user_id)

    def get_user_context_for_ai(
        self, user_id: str, now: Optional[datetime] = None
    ) -> UserContext:
        """
        Summarize a user for the body-double prompt.

        Works for unknown users too: the name falls back to "there".
        """
        profile = self.get_user_profile(user_id)
        wins = self.get_dopamine_wins(user_id)
        cutoff = (now or utc_now()) - RECENT_WINS_WINDOW

        name = "there"
        if profile and profile.email and profile.email.split("@")[0]:
            name = profile.email.split("@")[0]

        return UserContext(
            name=name,
            adhd_hurdles=profile.adhd_hurdles if profile else [],
            dietary_restrictions=profile.dietary_restrictions if profile else [],
            recent_wins=sum(1 for w in wins if w.timestamp > cutoff),
        )

    # ------------------------------------------------------------------
    # Account linking
    # ------------------------------------------------------------------

    def link_anonymous_data(self, anonymous_user_id: str, permanent_user_id: str) -> bool:
        """
        Move a guest user's data onto their permanent account.

        Copies hurdles, restrictions, current plan and preferences, moves
        plans and wins, then deletes the guest profile.

        Returns:
            True if there was guest data to move. Linking an account to
            itself moves nothing and returns False.

        Raises:
            ProfileNotFound: If the permanent profile does not exist
        """
        if anonymous_user_id == permanent_user_id:
            return False

        with self._transaction("link_anonymous_data") as session:
            anonymous = session.get(UserRecord, anonymous_user_id)
            if anonymous is None:
                return False

            permanent = session.get(UserRecord, permanent_user_id)
            if permanent is None:
                raise ProfileNotFound(f"No profile for user '{permanent_user_id}'")

            permanent.adhd_hurdles = anonymous.adhd_hurdles
            permanent.dietary_restrictions = anonymous.dietary_restrictions
            permanent.current_plan_id = anonymous.current_plan_id
            permanent.preferences = anonymous.preferences
            permanent.updated_at = utc_now()

            for plan_record in session.scalars(
                select(FocusPlanRecord).where(FocusPlanRecord.user_id == anonymous_user_id)
            ):
                plan_record.user_id = permanent_user_id
                plan_record.plan_data = {**plan_record.plan_data, "userId": permanent_user_id}

            for win_record in session.scalars(
                select(DopamineWinRecord).where(DopamineWinRecord.user_id == anonymous_user_id)
            ):
                win_record.user_id = permanent_user_id

            session.flush()
            session.delete(anonymous)

        logger.info(
            "anonymous_data_linked",
            anonymous_user_id=anonymous_user_id,
            permanent_user_id=permanent_user_id,
        )
        self._notify(permanent_user_id, self.get_current_plan(permanent_user_id))
        self._notify_wins(permanent_user_id)
        return True
