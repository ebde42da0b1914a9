import unittest
from io import StringIO
from unittest.mock import AsyncMock, MagicMock, patch

from rich.console import Console

from terminal_ai.ai.provider import AIProvider, CommandSuggestion
from terminal_ai.exceptions import ResponseFormatError
from terminal_ai.terminal.executor import CommandExecutor, ExecutionResult
from terminal_ai.terminal.prompt import TerminalPrompt


@patch("terminal_ai.terminal.prompt.get_system_context", return_value="context")
class TestTerminalPrompt(unittest.IsolatedAsyncioTestCase):
    """Tests for the interactive loop."""

    def setUp(self):
        self.output = StringIO()
        self.console = Console(file=self.output, width=120, color_system=None)
        self.provider = MagicMock(spec=AIProvider)
        self.provider.get_suggestion = AsyncMock()
        self.executor = MagicMock(spec=CommandExecutor)
        self.executor.get_working_directory.return_value = "/home/alice"
        self.terminal = TerminalPrompt(self.provider, executor=self.executor, console=self.console)

    @patch("terminal_ai.terminal.prompt.Confirm.ask", return_value=True)
    @patch("terminal_ai.terminal.prompt.Prompt.ask", side_effect=["show hidden files", "exit"])
    async def test_request_is_suggested_confirmed_and_executed(self, mock_prompt, mock_confirm, mock_context):
        """A safe suggestion defaults to running and its output is shown."""
        # Arrange
        self.provider.get_suggestion.return_value = CommandSuggestion(
            command="ls -a", explanation="List all files, including hidden ones", dangerous=False
        )
        self.executor.execute.return_value = ExecutionResult(stdout=".bashrc\nnotes.txt", stderr="", exit_code=0)

        # Action
        await self.terminal.start()

        # Assert
        mock_context.assert_called_once_with("/home/alice")
        self.provider.get_suggestion.assert_awaited_once_with("show hidden files", "context")
        self.assertTrue(mock_confirm.call_args.kwargs["default"])
        self.executor.execute.assert_called_once_with("ls -a")

        output = self.output.getvalue()
        self.assertIn("ls -a", output)
        self.assertIn("List all files, including hidden ones", output)
        self.assertIn("Success", output)
        self.assertIn("Output:\n.bashrc\nnotes.txt", output)
        self.assertIn("Goodbye!", output)
        self.assertFalse(self.terminal.is_running)

    @patch("terminal_ai.terminal.prompt.Confirm.ask", return_value=False)
    @patch("terminal_ai.terminal.prompt.Prompt.ask", side_effect=["delete everything", "quit"])
    async def test_dangerous_command_defaults_to_no(self, mock_prompt, mock_confirm, mock_context):
        """Dangerous suggestions show a warning and are not run unless confirmed."""
        self.provider.get_suggestion.return_value = CommandSuggestion(
            command="rm -rf ./*", explanation="Delete everything here", dangerous=True
        )

        await self.terminal.start()

        self.assertFalse(mock_confirm.call_args.kwargs["default"])
        self.executor.execute.assert_not_called()
        output = self.output.getvalue()
        self.assertIn("Warning: This command may modify or delete files!", output)
        self.assertIn("Command skipped", output)

    @patch("terminal_ai.terminal.prompt.Confirm.ask", return_value=True)
    @patch("terminal_ai.terminal.prompt.Prompt.ask", side_effect=["break it", "exit"])
    async def test_failed_command_shows_error_output(self, mock_prompt, mock_confirm, mock_context):
        self.provider.get_suggestion.return_value = CommandSuggestion("false", "Fails", False)
        self.executor.execute.return_value = ExecutionResult(stdout="", stderr="Command failed: false", exit_code=1)

        await self.terminal.start()

        output = self.output.getvalue()
        self.assertIn("Error output:\nCommand failed: false", output)
        self.assertNotIn("Success", output)

    @patch("terminal_ai.terminal.prompt.Confirm.ask", return_value=True)
    @patch("terminal_ai.terminal.prompt.Prompt.ask", side_effect=["find big files", "exit"])
    async def test_used_tools_are_displayed(self, mock_prompt, mock_confirm, mock_context):
        self.provider.get_suggestion.return_value = CommandSuggestion(
            "du -sh *", "Sizes", False, used_tools=["list_directory"]
        )
        self.executor.execute.return_value = ExecutionResult("", "", 0)

        await self.terminal.start()

        self.assertIn("Tools used: list_directory", self.output.getvalue())

    @patch("terminal_ai.terminal.prompt.Prompt.ask", side_effect=["", "   ", "clear", "exit"])
    async def test_blank_lines_and_clear(self, mock_prompt, mock_context):
        """Blank input is ignored and `clear` resets the provider history."""
        await self.terminal.start()

        self.provider.clear_history.assert_called_once()
        self.provider.get_suggestion.assert_not_called()
        self.assertIn("Conversation history cleared", self.output.getvalue())
        self.assertEqual(mock_prompt.call_count, 4)

    @patch("terminal_ai.terminal.prompt.Prompt.ask", side_effect=["list files", "exit"])
    async def test_errors_do_not_stop_the_loop(self, mock_prompt, mock_context):
        """A failing request is reported and the loop keeps going."""
        self.provider.get_suggestion.side_effect = ResponseFormatError("Could not parse JSON response from AI")

        await self.terminal.start()

        self.assertIn("Error: Could not parse JSON response from AI", self.output.getvalue())
        self.assertEqual(mock_prompt.call_count, 2)
        self.executor.execute.assert_not_called()

    @patch("terminal_ai.terminal.prompt.Prompt.ask", side_effect=EOFError)
    async def test_end_of_input_exits(self, mock_prompt, mock_context):
        await self.terminal.start()

        self.assertFalse(self.terminal.is_running)
        self.assertIn("Goodbye!", self.output.getvalue())

    def test_stop(self, mock_context):
        """`stop` clears the running flag."""
        self.terminal.is_running = True

        self.terminal.stop()

        self.assertFalse(self.terminal.is_running)
