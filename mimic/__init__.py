"""Mimic: imitates chat authors with per-author Markov chains.

Modules, leaf-first:
  text       whitespace tokenizer
  syllables  syllable counting (overrides, cmudict, heuristic)
  markov     order-1 chain with forward and backward walks
  cache      per-scope model memo over the message store
  mentions   mention parsing and seed extraction
  haiku      5-7-5 detector
  pipeline   model -> generate -> recombine -> haiku formatting
  storage    JSON message log
  slack      Web API client (notifier + profile lookup)
  events     Events API dispatch, signature check, dedup gate
  routes/app FastAPI surface
  importer   Slack export loader
"""
