# stagehand

Building blocks for LLM-driven browser automation. The package holds the
bookkeeping, logging, metrics, LLM and prompt parts; the browser itself is
reached through an adapter that you write.

## Modules

- `stagehand.context`: `StagehandContext` tracks browser pages (`StagehandPage`),
  their root frame ids, which page is active, and whether the DOM helper script
  has been injected into each page. Browser work goes through a
  `StagehandAdapter` subclass that you supply: `inject_dom_script` (async),
  `log_debug`, `log_error` and `notify_active_page`.
  `ensure_dom_script(page_id)` injects the script once and returns `True` only
  on the call that injected it.
- `stagehand.log`: `StagehandLogger` filters records by `Verbosity`
  (`MINIMAL`, `MEDIUM`, `DETAILED`) and `LogLevel` (`ERROR`, `INFO`, `DEBUG`).
  Errors always pass the filter. Records (`LogRecord`) go to an external callback
  if one is set in `LogConfig.external_logger`, otherwise `default_log_handler`
  prints them. `sync_log_handler(payload, logger)` turns an API log payload,
  with or without an outer `"message"` wrapper, into a log call.
- `stagehand.metrics`: `StagehandMetrics` counts prompt tokens, completion
  tokens and inference milliseconds per `StagehandFunctionName` (act, extract,
  observe, agent) and in total. `record` adds one call, `merge` adds another
  instance. `start_inference_timer()` and `get_inference_time_ms(start)`
  measure whole elapsed milliseconds.
- `stagehand.llm_client`: `StagehandLlmClient` builds chat completion requests
  from messages and `ChatCompletionOptions`, sends them through any
  `ChatCompletionProvider`, logs each request to an optional callback, calls an
  optional metrics callback with the response and the elapsed `timedelta`, and
  records usage in an optional `StagehandMetrics` store.
  `parse_function_name` maps `"act"`, `"extract"`, `"observe"` and `"agent"`
  (any case, surrounding spaces ignored) to their category; anything else
  counts as agent.
- `stagehand.openai_provider`: `OpenAiChatProvider` posts requests to the
  `/chat/completions` endpoint of an OpenAI-compatible HTTP API using `httpx`.
- `stagehand.llm_errors`: `StagehandLlmError` and its subclasses
  `MissingApiKeyError`, `MissingDefaultModelError`, `InvalidRequestError` and
  `ProviderError`.
- `stagehand.prompts`: system and user prompt builders for observe, extract
  and act, `SUPPORTED_ACTIONS` and `effective_observe_instruction`, which falls
  back to a default instruction when the user's is missing or blank.
- `stagehand.results`: `resolve_result_value` unwraps a response under
  `result`, `data` or `elements`; `find_metadata` reads `metadata` from the top
  level or from inside `result`; `extract_metrics` returns
  `(promptTokens, completionTokens, inferenceTimeMs)` when all three are
  non-negative integers, else `None`.
- `stagehand.settle`: `NetworkSettleTracker` follows request events you feed it
  (`request_will_be_sent`, `finish_request`, `response_received`,
  `frame_stopped`) and reports through `is_quiet()` once no request has been in
  flight for the quiet window (0.5 s by default). WebSocket and EventSource
  requests are ignored; `sweep_stalled` forces completion of requests older
  than a threshold (2 s by default) and returns them.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
import asyncio

from stagehand.llm_client import ChatCompletionOptions, StagehandLlmClient
from stagehand.metrics import StagehandMetrics
from stagehand.openai_provider import OpenAiChatProvider

provider = OpenAiChatProvider.from_options(api_key="placeholder", client_options=None)
metrics = StagehandMetrics()
client = StagehandLlmClient("gpt-4o", provider, metrics_store=metrics)

messages = [
    {"role": "system", "content": "You are Stagehand."},
    {"role": "user", "content": "Say hello."},
]

response = asyncio.run(
    client.create_chat_completion(messages, ChatCompletionOptions(temperature=0.2), "act")
)
print(metrics.act_prompt_tokens, metrics.total_completion_tokens)
```

If no API key is passed, `OpenAiChatProvider.from_options` reads
`MODEL_API_KEY`, then `OPENAI_API_KEY`, and raises `MissingApiKeyError` if
neither is set. `client_options` may set the API base (`api_base`, `apiBase`,
`base_url` or `baseURL`), the organization (`organization`, `org_id`, `orgId`)
and the project (`project`, `project_id`, `projectId`).

## Errors

Errors are raised as exceptions. Context operations on unknown pages raise
`PageNotFoundError` (also a `KeyError`). If the adapter raises `AdapterError`
while injecting the script, `ensure_dom_script` raises `ScriptInjectionError`.
A blank model raises `MissingDefaultModelError`, malformed messages raise
`InvalidRequestError`, and any exception from a provider, including an
`httpx.HTTPStatusError` from `OpenAiChatProvider`, is wrapped in
`ProviderError`.

## What this package does not do

It does not start, connect to or drive a browser, and it sends no browser
protocol commands: page operations go through your `StagehandAdapter`, and
`NetworkSettleTracker` only reacts to events that you pass to it. It ships no
DOM helper script of its own, no command-line program and no server.