"""Builds and spawns UI objects. UIConstructor and GlobalPanels live here."""

import textwrap

from rich import box
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from llamachat import __version__
from llamachat.globals import CONFIG_FILE, CONSOLE, LOG_DIR
from llamachat.protocol import ExchangeFailure
from llamachat.registry import ModelDescriptor


class UIConstructor:
    """Constructs and returns various UI objects"""

    def __init__(self, config):
        self.config = config

    def user_panel_constructor(self, content: str) -> Panel:
        return Panel(
            content,
            box=box.HORIZONTALS,
            padding=(0, 0),
            title=Text("👤 You", style="bold blue"),
            title_align="left",
            border_style="blue",
            style="default",
        )

    def assistant_panel_constructor(self, content: str) -> Panel:
        return Panel(
            Markdown(content, code_theme=self.config.rich_code_theme),
            title=Text("🦙 Ollama", style="bold green"),
            title_align="left",
            border_style="green",
            style="default",
            width=None,
            box=box.HORIZONTALS,
            padding=(0, 0),
        )

    def intro_panel_constructor(self, model: str) -> Panel:
        intro_text = Text.assemble(
            ("✨ Your local AI assistant, no API keys needed!", "cyan"),
            ("\nModel: ", "bold sandy_brown"),
            (model, "bold cyan"),
            ("\nServer: ", "bold sandy_brown"),
            (self.config.base_url),
            ("\nSystem Prompt: ", "bold sandy_brown"),
            (self.config.system_prompt, "italic"),
        )
        return Panel(
            intro_text,
            title=Text(f"🦙 Llama Chat {__version__}", "bold magenta"),
            title_align="left",
            border_style="magenta",
            box=box.HORIZONTALS,
            padding=(0, 0),
        )

    def status_panel_constructor(self, model: str, turns: int) -> Panel:
        status_text = Text.assemble(
            ("✅ Ollama is running and accessible!", "green"),
            ("\n📡 Server: ", "cyan"),
            (self.config.base_url),
            ("\n🤖 Current model: ", "cyan"),
            (model, "bold green"),
            ("\n💬 Turn: ", "cyan"),
            (f"{turns}"),
        )
        return Panel(status_text, border_style="dim", expand=False)

    def error_panel_constructor(self, error: str, exception: str) -> Panel:
        return Panel(
            exception,
            title=Text(f"❌ {error}", style="bold red"),
            title_align="left",
            border_style="red",
            expand=False,
        )

    def model_list_constructor(
        self, models: list[ModelDescriptor], active: str
    ) -> Text:
        listing = Text("📋 Available Models:", style="bold cyan")
        for i, m in enumerate(models, start=1):
            if m.identifier == active:
                listing.append(f"\n➤ {i}. {m.identifier}", style="bold green")
            else:
                listing.append(f"\n  {i}. {m.identifier}", style="white")
        return listing

    def help_chart_constructor(self, model: str) -> Markdown:
        return Markdown(
            textwrap.dedent(f"""
            | **Commands** | *Session and model management* |
            | --- | ----------- |
            | `/help` | Show this help message. |
            | `/clear` | Clear the conversation history. |
            | `/history` | Show the conversation history. |
            | `/models` | List the models installed on the server. |
            | `/model` | Change the current model. |
            | `/status` | Check the connection to Ollama. |
            | `/quit` or `/exit` | Exit Llama Chat. |
            | | |
            | **Chatting:** | Just type your message and press Enter. |
            | **Current model:** | *{model}* |

            - Your configuration file is located at: `{CONFIG_FILE}`
            - Your error logs are located at:        `{LOG_DIR}`
            """)
        )


class GlobalPanels:
    """Global panel spawner"""

    def __init__(self, ui: UIConstructor):
        self.ui: UIConstructor = ui

    def spawn_intro_panel(self, model: str):
        """Simple welcome panel, prints on application launch."""
        CONSOLE.print(self.ui.intro_panel_constructor(model))
        CONSOLE.print(Markdown("Type `/help` for commands or start chatting!"))
        CONSOLE.print()

    def spawn_error_panel(self, error: str, exception: str):
        CONSOLE.print(self.ui.error_panel_constructor(error, exception))
        CONSOLE.print()

    def spawn_failure_panel(self, failure: ExchangeFailure):
        """Error panel for a classified exchange failure"""
        self.spawn_error_panel(failure.title, f"{failure.detail}\n{failure.hint}")

    def spawn_user_panel(self, content: str):
        CONSOLE.print(self.ui.user_panel_constructor(content))
        CONSOLE.print()

    def spawn_assistant_panel(self, content: str):
        CONSOLE.print(self.ui.assistant_panel_constructor(content))
        CONSOLE.print()

    def spawn_status_panel(self, model: str, turns: int):
        CONSOLE.print(self.ui.status_panel_constructor(model, turns))
        CONSOLE.print()

    def spawn_model_list(self, models: list[ModelDescriptor], active: str):
        CONSOLE.print(self.ui.model_list_constructor(models, active))

    def spawn_help_chart(self, model: str):
        CONSOLE.print(self.ui.help_chart_constructor(model))
        CONSOLE.print()

    def spawn_unreachable_notice(self):
        """Guidance shown whenever the server cannot be reached."""
        CONSOLE.print("[red]❌ Cannot connect to Ollama![/red]")
        CONSOLE.print("[yellow]💡 Make sure Ollama is running:[/yellow]")
        CONSOLE.print("[bold cyan]   ollama serve[/bold cyan]\n")
