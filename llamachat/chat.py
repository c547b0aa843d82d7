#!/usr/bin/env python3

# <~~~~~~~~~~>
#  LLAMA CHAT
# <~~~~~~~~~~>

import argparse
import logging
import sys
from enum import Enum

from llamachat import __version__
from llamachat.cli_controller import CLIController
from llamachat.config import Config
from llamachat.context import ChatContext
from llamachat.globals import (
    COMMAND_PREFIX,
    CONSOLE,
    init_logger,
    log_exception,
    root_prompt,
)
from llamachat.protocol import ExchangeResult, Reply
from llamachat.session_manager import Role
from llamachat.ui import GlobalPanels, UIConstructor


class DispatchState(Enum):
    AWAITING_INPUT = "awaiting_input"
    EXECUTING_COMMAND = "executing_command"
    EXECUTING_CHAT_TURN = "executing_chat_turn"
    STOPPED = "stopped"


class Chat:
    """Houses the main application loop for Llama Chat"""

    def __init__(self, ctx: ChatContext, panel: GlobalPanels):
        self.ctx: ChatContext = ctx
        self.panel: GlobalPanels = panel
        self.controller = CLIController(ctx, panel)
        self.state: DispatchState = DispatchState.AWAITING_INPUT

    # <~~DISPATCH~~>
    @staticmethod
    def classify(text: str) -> DispatchState:
        if text.startswith(COMMAND_PREFIX):
            return DispatchState.EXECUTING_COMMAND
        return DispatchState.EXECUTING_CHAT_TURN

    def dispatch(self, user_input: str) -> DispatchState:
        """Handles one line of input and returns the state to continue in"""
        text = user_input.strip()
        if not text:
            return DispatchState.AWAITING_INPUT

        self.state = self.classify(text)
        if self.state is DispatchState.EXECUTING_COMMAND:
            if not self.controller.handle_input(text):
                return DispatchState.STOPPED
        else:
            self.chat_turn(text)
        return DispatchState.AWAITING_INPUT

    def chat_turn(self, text: str) -> ExchangeResult:
        """
        Sends one user message and records the reply.

        A failed exchange leaves the user message in place and records no
        assistant message.
        """
        session = self.ctx.session
        session.append_message(Role.USER, text)
        with CONSOLE.status("[yellow]🦙 Thinking...[/yellow]"):
            result = self.ctx.adapter.exchange(session, self.ctx.model)

        if isinstance(result, Reply):
            session.append_message(Role.ASSISTANT, result.text)
            self.panel.spawn_assistant_panel(result.text)
        else:
            logging.error(f"Exchange with '{self.ctx.model}' failed: {result.detail}")
            self.panel.spawn_failure_panel(result)
        return result

    # <~~RUN~~>
    def startup(self) -> bool:
        """One-time connection check before the first prompt."""
        CONSOLE.print("[yellow]🔍 Checking Ollama connection...[/yellow]")
        if not self.ctx.registry.check_health():
            self.panel.spawn_unreachable_notice()
            CONSOLE.print("[yellow]   Then run this program again.[/yellow]\n")
            return False
        CONSOLE.print("[green]✅ Connected to Ollama successfully![/green]\n")
        return True

    def run(self):
        if not self.startup():
            self.state = DispatchState.STOPPED
            return
        self.panel.spawn_intro_panel(self.ctx.model)

        self.state = DispatchState.AWAITING_INPUT
        while self.state is not DispatchState.STOPPED:
            try:
                user_input = root_prompt()
            except (KeyboardInterrupt, EOFError):  # Ctrl + c / Ctrl + d exit
                CONSOLE.print("[yellow]👋 Farewell![/yellow]\n")
                self.state = DispatchState.STOPPED
                break
            # Non-quit exception catcher, the loop always survives a bad turn
            try:
                self.state = self.dispatch(user_input)
            except Exception as e:
                log_exception(e, "Error in dispatch()")
                self.panel.spawn_error_panel("ERROR", f"{e}")
                self.state = DispatchState.AWAITING_INPUT


# <~~MAIN FLOW~~>
def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="llamachat",
        description="Chat with models served by a local Ollama instance.",
    )
    parser.add_argument(
        "model", nargs="?", help="Model to chat with (default from settings)"
    )
    parser.add_argument("--host", help="Ollama server URL for this run")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    init_logger()
    config = Config()
    panel = GlobalPanels(UIConstructor(config))
    try:
        config.load()
    except (OSError, ValueError) as e:
        log_exception(e, "Could not load settings, using defaults")
        panel.spawn_error_panel("CONFIG ERROR", f"{e}\nUsing default settings.")
    if args.host:
        config.host = args.host

    try:
        ctx = ChatContext.create(config, args.model)
    except Exception as e:
        log_exception(e, "Failed to initialize the HTTP client")
        panel.spawn_error_panel("CRITICAL ERROR", f"{e}")
        sys.exit(1)

    try:
        Chat(ctx, panel).run()
    except KeyboardInterrupt:
        CONSOLE.print("[yellow]👋 Farewell![/yellow]\n")
    finally:
        ctx.close()


if __name__ == "__main__":
    main()
