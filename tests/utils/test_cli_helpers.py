"""Tests for the CLI helper functions."""

from __future__ import annotations

from unittest.mock import patch

import pytest
import typer

from tix.utils.cli_utils import ask_confirm, ask_select, ask_text, exit_with_error, handle_keyboard_interrupt


@pytest.mark.unit
class TestExitHelpers:
	"""Test cases for the exit helpers."""

	def test_exit_with_error(self) -> None:
		"""Errors exit with code 1 by default."""
		with patch("tix.utils.cli_utils.display_error_summary") as mock_summary, pytest.raises(typer.Exit) as excinfo:
			exit_with_error("Something failed", exception=ValueError("bad value"))

		assert excinfo.value.exit_code == 1
		summary = mock_summary.call_args.args[0]
		assert "Something failed" in summary
		assert "bad value" in summary

	def test_keyboard_interrupt_exit_code(self) -> None:
		"""Cancelling exits with 130."""
		with pytest.raises(typer.Exit) as excinfo:
			handle_keyboard_interrupt()

		assert excinfo.value.exit_code == 130


@pytest.mark.unit
class TestPrompts:
	"""Test cases for the questionary wrappers."""

	def test_ask_text(self) -> None:
		"""The answer is returned as text."""
		with patch("tix.utils.cli_utils.questionary.text") as mock_text:
			mock_text.return_value.ask.return_value = "My title"

			assert ask_text("Title:", default="x") == "My title"
		mock_text.assert_called_once_with("Title:", default="x")

	def test_cancelled_prompt_raises_keyboard_interrupt(self) -> None:
		"""questionary returns None on Ctrl-C, which is turned back into an interrupt."""
		with patch("tix.utils.cli_utils.questionary.confirm") as mock_confirm:
			mock_confirm.return_value.ask.return_value = None

			with pytest.raises(KeyboardInterrupt):
				ask_confirm("Continue?")

	def test_ask_select_ignores_unknown_default(self) -> None:
		"""A default that is not among the choices is dropped."""
		with patch("tix.utils.cli_utils.questionary.select") as mock_select:
			mock_select.return_value.ask.return_value = "b"

			assert ask_select("Pick", ["a", "b"], default="zzz") == "b"
		mock_select.assert_called_once_with("Pick", choices=["a", "b"], default=None)
