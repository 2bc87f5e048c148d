"""Async client for the lichess bot API plus an event-dispatch run loop.

Implement `lichess_bot.bot.Bot`, build a client with `lichess_bot.client.build_bot_client`
and hand both to `lichess_bot.run_loop.run`.
"""
