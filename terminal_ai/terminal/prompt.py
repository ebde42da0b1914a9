from typing import Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt

from .executor import CommandExecutor
from ..ai.provider import AIProvider
from ..logging import get_logger
from ..utils.context import get_system_context

log = get_logger(__name__)

EXIT_COMMANDS = ("exit", "quit")
CLEAR_COMMAND = "clear"


class TerminalPrompt:
    """The interactive read-suggest-confirm-execute loop."""

    def __init__(
        self,
        ai_provider: AIProvider,
        executor: Optional[CommandExecutor] = None,
        console: Optional[Console] = None,
    ):
        self.ai_provider = ai_provider
        self.executor = executor or CommandExecutor()
        self.console = console or Console()
        self.is_running = False

    async def start(self):
        self.is_running = True

        self.console.print("\n[bold cyan]🤖 Terminal AI[/]")
        self.console.print("[grey50]Talk to AI and let it execute commands for you[/]")
        self.console.print('[grey50]Type "exit" or "quit" to leave, "clear" to clear history[/]\n')

        while self.is_running:
            await self._prompt_loop()

    def stop(self):
        self.is_running = False

    def say_goodbye(self):
        self.console.print("\n[cyan]Goodbye! 👋[/]\n")

    async def _prompt_loop(self):
        try:
            user_input = Prompt.ask("[green]You:[/]", console=self.console, default="", show_default=False)
        except EOFError:
            user_input = "exit"

        user_input = (user_input or "").strip()
        if not user_input:
            return

        if user_input in EXIT_COMMANDS:
            self.say_goodbye()
            self.stop()
            return

        if user_input == CLEAR_COMMAND:
            self.ai_provider.clear_history()
            self.console.print("\n[yellow]✓ Conversation history cleared[/]\n")
            return

        await self.handle_user_request(user_input)

    async def handle_user_request(self, request: str):
        try:
            with self.console.status("Thinking..."):
                context = get_system_context(self.executor.get_working_directory())
                suggestion = await self.ai_provider.get_suggestion(request, context)
        except Exception as e:
            log.error("suggestion_failed", request=request, error=str(e))
            self.console.print(f"\n✗ Error: {e}\n", style="red", markup=False, highlight=False)
            return

        self.console.print("\n[blue]💡 AI suggests:[/]")
        self.console.print(f"   {suggestion.command}", markup=False, highlight=False)
        self.console.print(f"   {suggestion.explanation}", style="grey50", markup=False, highlight=False)

        if suggestion.used_tools:
            self.console.print(f"   Tools used: {', '.join(suggestion.used_tools)}", style="magenta", markup=False)

        if suggestion.dangerous:
            self.console.print("[red]   ⚠️  Warning: This command may modify or delete files![/]")

        # Dangerous commands are only run when the user explicitly says yes.
        try:
            execute = Confirm.ask(
                "Execute this command?", console=self.console, default=not suggestion.dangerous
            )
        except EOFError:
            execute = False
        if not execute:
            self.console.print("\n[yellow]✗ Command skipped[/]\n")
            return

        with self.console.status("Executing..."):
            result = self.executor.execute(suggestion.command)

        if result.exit_code == 0:
            self.console.print("\n[green]✓ Success[/]")
            if result.stdout:
                self.console.print("\nOutput:", style="bold")
                self.console.print(result.stdout, markup=False, highlight=False)
        else:
            self.console.print("\n[red]✗ Error[/]")
            if result.stderr:
                self.console.print("\nError output:", style="red")
                self.console.print(result.stderr, markup=False, highlight=False)
        self.console.print("")
