from markupruns.markup.partition import normalize_whitespace, parse, strip_to_plain_text

__all__ = ["normalize_whitespace", "parse", "strip_to_plain_text"]
