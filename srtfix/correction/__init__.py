"""Replacement strategies for positional corrections and known words."""

from .cue_replacer import (
    apply_directive,
    find_cue_block,
    iter_cue_blocks,
    replace_first_in_file,
)

from .global_replacer import (
    apply_known_word_rule,
    apply_known_word_rule_to_subtitle,
    check_line_count,
)

__all__ = [
    "apply_directive",
    "find_cue_block",
    "iter_cue_blocks",
    "replace_first_in_file",
    "apply_known_word_rule",
    "apply_known_word_rule_to_subtitle",
    "check_line_count",
]
