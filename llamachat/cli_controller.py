"""Command interactivity logic lives here."""

from prompt_toolkit import prompt
from prompt_toolkit.formatted_text import HTML

from llamachat.context import ChatContext
from llamachat.globals import CONSOLE
from llamachat.registry import ModelDescriptor
from llamachat.session_manager import Role
from llamachat.ui import GlobalPanels


def resolve_model_choice(raw: str, models: list[ModelDescriptor]) -> str | None:
    """
    Maps a 1-based menu selection onto a model identifier.

    Returns None for an empty selection, raises ValueError for anything that
    is not a number within the listed range.
    """
    raw = raw.strip()
    if not raw:
        return None
    try:
        choice = int(raw)
    except ValueError:
        raise ValueError("Invalid input!")
    if not 1 <= choice <= len(models):
        raise ValueError("Invalid choice!")
    return models[choice - 1].identifier


class CLIController:
    """Handles and supports all command input"""

    def __init__(self, ctx: ChatContext, panel: GlobalPanels):
        self.ctx = ctx
        self.panel = panel

        # Command dict
        self.commands = {
            "/help": self.spawn_help_chart,
            "/clear": self.clear_history,
            "/history": self.show_history,
            "/models": self.show_models,
            "/model": self.choose_model,
            "/status": self.check_status,
            "/quit": self.quit,
            "/exit": self.quit,
        }

    # <~~HELPERS~~>
    def _prompt_wrapper(self, prefix) -> str:
        """Prompt_toolkit wrapper, Ctrl + c / Ctrl + d read as an empty answer."""
        try:
            return prompt(prefix).strip()
        except (KeyboardInterrupt, EOFError):
            CONSOLE.print("[dim]Canceled.[/dim]\n")
            return ""

    def _install_hint(self):
        CONSOLE.print("[cyan]   ollama pull llama3.2[/cyan]")
        CONSOLE.print("[cyan]   ollama pull codellama[/cyan]\n")

    def handle_input(self, user_input: str) -> bool:
        """Runs a command. Returns False once the loop should stop."""
        cmd = user_input.strip().lower()
        action = self.commands.get(cmd)
        if action is None:
            CONSOLE.print(
                f"[red]❌ Unknown command:[/red] {user_input}", highlight=False
            )
            CONSOLE.print("[yellow]💡 Type '/help' for available commands.[/yellow]\n")
            return True
        return action() is not False

    # <~~CHARTS~~>
    def spawn_help_chart(self):
        self.panel.spawn_help_chart(self.ctx.model)

    # <~~SESSION MANAGEMENT~~>
    def clear_history(self):
        self.ctx.session.reset()
        CONSOLE.print("[green]✅ Conversation history cleared.[/green]\n")

    def show_history(self):
        """Replays the conversation, minus the system prompt."""
        CONSOLE.print("[bold cyan]=== Conversation History ===[/bold cyan]")
        history = self.ctx.session.history()
        if not history:
            CONSOLE.print("[dim]No conversation history yet.[/dim]")
        for msg in history:
            if msg.role is Role.USER:
                self.panel.spawn_user_panel(msg.content)
            else:
                self.panel.spawn_assistant_panel(msg.content)
        CONSOLE.print("[cyan]============================[/cyan]\n")

    def quit(self) -> bool:
        CONSOLE.print("[green]👋 Goodbye! Thanks for using Llama Chat![/green]\n")
        return False

    # <~~MODEL MANAGEMENT~~>
    def show_models(self):
        """Lists installed models, marking the active one."""
        with CONSOLE.status("[yellow]🔍 Fetching available models...[/yellow]"):
            models = self.ctx.registry.list_models()
        if not models:
            CONSOLE.print("[red]❌ No models found. Install a model first:[/red]")
            self._install_hint()
            return
        self.panel.spawn_model_list(models, self.ctx.model)
        CONSOLE.print()

    def choose_model(self):
        """List installed models, then switch to the operator's pick."""
        models = self.ctx.registry.list_models()
        if not models:
            CONSOLE.print("[red]❌ No models available. Install one first:[/red]")
            self._install_hint()
            return
        self.panel.spawn_model_list(models, self.ctx.model)

        raw = self._prompt_wrapper(
            HTML(
                "<ansiyellow>Enter model number (or press Enter to cancel): </ansiyellow>"
            )
        )
        try:
            selected = resolve_model_choice(raw, models)
        except ValueError as e:
            CONSOLE.print(f"[red]❌ {e}[/red]\n")
            return
        if selected is None:
            return

        self.ctx.model = selected
        CONSOLE.print(
            f"[green]✅ Model changed to:[/green] [bold cyan]{selected}[/bold cyan]\n"
        )

    # <~~CONNECTION~~>
    def check_status(self):
        CONSOLE.print("[yellow]🔍 Checking Ollama connection...[/yellow]")
        if self.ctx.registry.check_health():
            self.panel.spawn_status_panel(
                self.ctx.model, self.ctx.session.count_turns()
            )
        else:
            self.panel.spawn_unreachable_notice()
