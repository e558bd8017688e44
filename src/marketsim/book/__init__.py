"""Order book synthesis and bid/ask views."""

from marketsim.book.order_book import OrderBookSynthesizer, OrderBookView, split_book, synthesize

__all__ = [
    "OrderBookSynthesizer",
    "OrderBookView",
    "split_book",
    "synthesize",
]
