#!/usr/bin/env python3
"""
Session Controller - drives one Langterm run from model resolution to execution.

Each stage handler takes the current Session and returns the next one; nothing
is kept on the controller between stages.
"""

import enum
import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from pygments.style import Style as _PygmentsStyle
from pygments.token import (
    Token, Comment, Keyword, Name, String, Number, Operator, Error
)
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.theme import Theme

import executor
import i18n
from command_engine import (
    CommandEngine,
    ModelDescriptor,
    OSFamily,
    is_available,
    list_models,
)
from errors import (
    EmptyInstructionError,
    LangtermError,
    NoModelsError,
    ServiceUnavailableError,
)
from preferences import Preference, PreferenceStore

logger = logging.getLogger(__name__)

# Message roles used for every operator-facing line
LANGTERM_THEME = Theme({
    "accent":  "#5fafff",
    "info":    "bold #5fafff",
    "success": "green",
    "warning": "yellow",
    "error":   "bold red",
    "muted":   "grey62",
})


class _CommandStyle(_PygmentsStyle):
    """Shell highlighting for the suggested command, transparent background."""
    background_color = "default"
    default_style = ""
    styles = {
        Token:           "#e4e4e4",
        Comment:         "#8a8a8a italic",
        Keyword:         "#5fafff",
        Name.Builtin:    "#87d787 bold",
        Name.Variable:   "#d7af5f",
        String:          "#d7d787",
        Number:          "#d787af",
        Operator:        "#ffaf5f",
        Error:           "#ff5f5f",
    }


class Stage(str, enum.Enum):
    IDLE = "idle"
    RESOLVING_MODEL = "resolving-model"
    AWAITING_SERVICE = "awaiting-service"
    GENERATING = "generating"
    AWAITING_CONFIRMATION = "awaiting-confirmation"
    EXECUTING = "executing"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STAGES = frozenset({Stage.DONE, Stage.FAILED})


@dataclass(frozen=True)
class Session:
    stage: Stage = Stage.IDLE
    model: Optional[str] = None
    instruction: Optional[str] = None
    command: Optional[str] = None
    error: Optional[LangtermError] = None

    @property
    def exit_code(self) -> int:
        return 1 if self.stage is Stage.FAILED else 0


class SessionController:
    """
    Wires the collaborators together. `ask` reads one line from the operator
    and may raise KeyboardInterrupt/EOFError. EOF at the instruction prompt
    is an empty instruction; elsewhere both are left to the caller.
    """

    def __init__(
        self,
        store: PreferenceStore,
        engine: CommandEngine,
        ask: Callable[[str], str],
        console: Optional[Console] = None,
        check_service: Callable[[], bool] = is_available,
        fetch_models: Callable[[], List[ModelDescriptor]] = list_models,
        execute: Callable[[str], None] = executor.execute,
    ):
        self.store = store
        self.engine = engine
        self.ask = ask
        self.console = console or Console(theme=LANGTERM_THEME)
        self.check_service = check_service
        self.fetch_models = fetch_models
        self.execute = execute
        self._handlers = {
            Stage.IDLE: self._start,
            Stage.RESOLVING_MODEL: self._resolve_model,
            Stage.AWAITING_SERVICE: self._await_service,
            Stage.GENERATING: self._generate,
            Stage.AWAITING_CONFIRMATION: self._confirm,
            Stage.EXECUTING: self._execute,
        }

    def run(self, session: Session) -> Session:
        """Advance `session` until it reaches done or failed."""
        while session.stage not in TERMINAL_STAGES:
            logger.debug("Stage %s", session.stage.value)
            try:
                session = self._handlers[session.stage](session)
            except LangtermError as e:
                logger.debug("Session failed in %s: %s", session.stage.value, e)
                session = replace(session, stage=Stage.FAILED, error=e)
        return session

    # ----- stages -----

    def _start(self, session: Session) -> Session:
        return replace(session, stage=Stage.RESOLVING_MODEL)

    def _resolve_model(self, session: Session) -> Session:
        # An override is used as-is and never persisted
        if session.model:
            return replace(session, stage=Stage.AWAITING_SERVICE)

        pref = self.store.load()
        if pref is not None:
            return replace(session, model=pref.model, stage=Stage.AWAITING_SERVICE)

        self.console.print(i18n.t("setup.no_config"), style="warning")
        self.console.print()
        model = self.run_setup()
        self.console.print("\n---\n", style="muted")
        return replace(session, model=model, stage=Stage.AWAITING_SERVICE)

    def _await_service(self, session: Session) -> Session:
        if not self.check_service():
            raise ServiceUnavailableError(
                i18n.t("error.service_unavailable"), hint=i18n.t("error.service_hint")
            )
        return replace(session, stage=Stage.GENERATING)

    def _generate(self, session: Session) -> Session:
        instruction = session.instruction
        if instruction is None:
            try:
                instruction = self.ask(i18n.t("cli.instruction_prompt"))
            except EOFError as e:
                # Closed stdin reads as no instruction at all
                raise EmptyInstructionError(i18n.t("error.no_input")) from e
        if not instruction.strip():
            raise EmptyInstructionError(i18n.t("error.no_input"))

        with self.console.status(f"[muted]{i18n.t('cli.thinking')}[/]", spinner="dots"):
            command = self.engine.generate(session.model, instruction)

        return replace(
            session,
            instruction=instruction,
            command=command,
            stage=Stage.AWAITING_CONFIRMATION,
        )

    def _confirm(self, session: Session) -> Session:
        self.show_command(session.command)
        self.console.print(f"\n{i18n.t('cli.confirm_hint')}", style="warning")

        # Exactly an empty line means go; anything else cancels
        if self.ask("") == "":
            return replace(session, stage=Stage.EXECUTING)

        self.console.print(i18n.t("cli.cancelled"), style="error")
        return replace(session, stage=Stage.DONE)

    def _execute(self, session: Session) -> Session:
        self.console.print(i18n.t("cli.running", command=session.command) + "\n", style="muted")
        self.execute(session.command)
        return replace(session, stage=Stage.DONE)

    # ----- setup -----

    def run_setup(self) -> str:
        """Pick a model interactively, save it, and return its name."""
        self.console.print(i18n.t("setup.welcome") + "\n", style="info")

        if not self.check_service():
            raise ServiceUnavailableError(
                i18n.t("error.service_unavailable"), hint=i18n.t("error.service_hint_setup")
            )

        models = self.fetch_models()
        if not models:
            raise NoModelsError(i18n.t("error.no_models"), hint=i18n.t("error.no_models_hint"))

        model = self.select_model(models)
        self.store.save(Preference(model=model))

        self.console.print(f"\n{i18n.t('setup.complete', model=model)}", style="success")
        self.console.print(f"\n{i18n.t('setup.usage_hint')}", style="muted")
        return model

    def select_model(self, models: List[ModelDescriptor]) -> str:
        self.console.print(f"\n{i18n.t('setup.available_models')}", style="accent")
        for index, model in enumerate(models, start=1):
            self.console.print(
                i18n.t("setup.model_entry", index=index, name=model.name),
                style="success",
                highlight=False,
            )

        while True:
            choice = self.ask(f"\n{i18n.t('setup.select_prompt')}")
            try:
                index = int(choice.strip())
            except ValueError:
                index = 0
            if 1 <= index <= len(models):
                return models[index - 1].name
            self.console.print(i18n.t("setup.invalid_selection"), style="error")

    # ----- rendering -----

    def show_command(self, command: str) -> None:
        lexer = "batch" if self.engine.os_family is OSFamily.WINDOWS else "bash"
        syntax = Syntax(command, lexer, theme=_CommandStyle, word_wrap=True, padding=(0, 1))
        self.console.print(f"\n{i18n.t('cli.suggested')}", style="success")
        self.console.print(Panel(syntax, border_style="accent", padding=(0, 0)))
