"""Tests for parameter parsing and substitution"""

import pytest
from unittest.mock import Mock

from parameters import ParameterResolver, ParameterToken, parse, resolve, validate_delimiters, highlight_parameters
from exceptions import DelimiterCollisionError


class TestParse:
    """Test cases for the parameter scanner"""

    def test_repeated_parameter_is_one_token(self):
        """Test that a name used twice yields one token with two spans"""
        tokens = parse("echo #name!, #name!", '#', '!')

        assert len(tokens) == 1
        assert tokens[0].name == 'name'
        assert tokens[0].spans == [(5, 11), (13, 19)]
        assert tokens[0].occurrences == 2

    def test_first_occurrence_order(self):
        """Test that tokens come back in the order they first appear"""
        tokens = parse("scp #file! #user!@#host!:#file!", '#', '!')

        assert [t.name for t in tokens] == ['file', 'user', 'host']

    def test_run_ends_at_whitespace_without_ending_token(self):
        """Test that a parameter without its ending token stops at whitespace"""
        tokens = parse("grep #pattern /var/log", '#', '!')

        assert tokens == [ParameterToken('pattern', [(5, 13)])]

    def test_run_ends_at_end_of_string(self):
        """Test that a parameter may close the template"""
        tokens = parse("cd #dir", '#', '!')

        assert tokens == [ParameterToken('dir', [(3, 7)])]

    def test_ending_token_stops_run_inside_word(self):
        """Test that the ending token lets literal text follow a parameter"""
        tokens = parse("ssh #user!@host", '#', '!')

        assert tokens == [ParameterToken('user', [(4, 10)])]

    def test_first_ending_token_wins(self):
        """Test that a second ending token right after a run is literal text"""
        template = "echo #word!!"
        tokens = parse(template, '#', '!')

        assert tokens == [ParameterToken('word', [(5, 11)])]
        assert resolve(template, tokens, {'word': 'hi'}) == "echo hi!"

    def test_without_ending_token(self):
        """Test that only whitespace terminates runs when no ending token is set"""
        tokens = parse("ssh #user!@host now", '#', None)

        assert tokens == [ParameterToken('user!@host', [(4, 15)])]

    def test_custom_tokens(self):
        """Test non-default delimiters"""
        tokens = parse("curl @url% -o @out%", '@', '%')

        assert [t.name for t in tokens] == ['url', 'out']

    @pytest.mark.parametrize("template", [
        "echo # not a parameter",
        "echo #! nothing",
        "echo trailing #",
        "echo \\#escaped",
        "no parameters at all",
        "",
    ])
    def test_malformed_runs_are_literal(self, template):
        """Test that nameless or escaped runs are not parameters"""
        assert parse(template, '#', '!') == []

    def test_escaped_token_next_to_parameter(self):
        """Test that an escaped token does not hide a following parameter"""
        tokens = parse("echo \\#tag #value", '#', '!')

        assert [t.name for t in tokens] == ['value']

    def test_no_start_token(self):
        """Test that an unset start token disables parameters"""
        assert parse("echo #name!", None, '!') == []


class TestResolve:
    """Test cases for substitution"""

    def test_same_value_for_every_occurrence(self):
        """Test broadcasting one value to every span of a name"""
        template = "echo #name!, #name!"

        assert resolve(template, parse(template, '#', '!'), {'name': 'X'}) == "echo X, X"

    def test_values_of_different_length(self):
        """Test that replacing right to left keeps later spans correct"""
        template = "cp #src! #dst!.bak"
        tokens = parse(template, '#', '!')

        assert resolve(template, tokens, {'src': 'a.txt', 'dst': 'backup/a'}) == "cp a.txt backup/a.bak"

    def test_missing_values_stay_literal(self):
        """Test that unresolved parameters keep their original text"""
        template = "ssh #user!@#host!"
        tokens = parse(template, '#', '!')

        assert resolve(template, tokens, {'host': 'example.com'}) == "ssh #user!@example.com"

    def test_template_without_parameters(self):
        """Test that plain commands pass through unchanged"""
        assert resolve("ls -la", [], {'anything': 'x'}) == "ls -la"


class TestDelimiters:
    """Test cases for delimiter validation"""

    def test_equal_tokens_rejected(self):
        with pytest.raises(DelimiterCollisionError):
            validate_delimiters('#', '#')

    @pytest.mark.parametrize("start,end", [('#', '!'), ('#', None), ('#', ''), (None, None)])
    def test_distinct_or_missing_tokens_accepted(self, start, end):
        validate_delimiters(start, end)


class TestParameterResolver:
    """Test cases for interactive resolution"""

    def test_prompts_once_per_distinct_name(self):
        """Test that each distinct parameter is asked for exactly once"""
        resolver = ParameterResolver('#', '!')
        prompt = Mock(side_effect=['alice', 'db1'])

        result = resolver.resolve_interactively("ssh #user!@#host! && echo #user!", prompt)

        assert result == "ssh alice@db1 && echo alice"
        assert [c.args[0].name for c in prompt.call_args_list] == ['user', 'host']

    def test_prompt_sees_preview_of_collected_values(self):
        """Test that the preview contains the values gathered so far"""
        resolver = ParameterResolver('#', '!')
        prompt = Mock(side_effect=['alice', 'db1'])

        resolver.resolve_interactively("ssh #user!@#host!", prompt)

        assert prompt.call_args_list[0].args[1] == "ssh #user!@#host!"
        assert prompt.call_args_list[1].args[1] == "ssh alice@#host!"

    def test_cancel_aborts_resolution(self):
        """Test that cancelling any prompt discards the whole resolution"""
        resolver = ParameterResolver('#', '!')
        prompt = Mock(side_effect=['alice', None])

        assert resolver.resolve_interactively("ssh #user!@#host! #port", prompt) is None
        assert prompt.call_count == 2

    def test_no_parameters_needs_no_prompt(self):
        """Test that plain commands resolve without asking"""
        resolver = ParameterResolver('#', '!')
        prompt = Mock()

        assert resolver.resolve_interactively("ls -la", prompt) == "ls -la"
        prompt.assert_not_called()

    def test_from_config(self, temp_config_file):
        """Test that the resolver picks up the configured tokens"""
        from config import Config

        resolver = ParameterResolver.from_config(Config(temp_config_file))

        assert resolver.resolve("echo @a% @b", {'a': '1', 'b': '2'}) == "echo 1 2"


class TestHighlight:
    """Test cases for parameter highlighting"""

    def test_parameters_are_styled(self):
        template = "ssh #user!@host"
        text = highlight_parameters(template, parse(template, '#', '!'), base_style="white", param_style="yellow")

        assert text.plain == template
        styled = [(span.start, span.end, str(span.style)) for span in text.spans]
        assert (4, 10, "yellow") in styled

    def test_plain_template(self):
        text = highlight_parameters("ls", [])

        assert text.plain == "ls"
