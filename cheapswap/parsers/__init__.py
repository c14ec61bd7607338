from cheapswap.parsers.decklist import format_decklist, parse_decklist
from cheapswap.parsers.names import clean_card_name, normalize_name
from cheapswap.parsers.scryfall import parse_card, parse_cards

__all__ = [
    "clean_card_name",
    "format_decklist",
    "normalize_name",
    "parse_card",
    "parse_cards",
    "parse_decklist",
]
