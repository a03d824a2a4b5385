"""Prompts for model-based intent classification."""

CLASSIFICATION_PROMPT = """You are the intent classifier for a multi-agent dispatch system.

Classify the user message into exactly one intent from this list:

control/approve | control/deny | control/permissions | control/queue-review
ops/daily-summary | ops/reminder-set | ops/status-report | ops/archive
research/web | research/trend | research/competitive | research/factual
discord/send-message | discord/moderate | discord/support | discord/alert
social/draft-tweet | social/post-tweet | social/retweet | social/dm | social/schedule
dev/bug-fix | dev/feature | dev/review | dev/architecture | dev/refactor
analytics/query | analytics/report | analytics/alert-setup
email/transactional | email/campaign-draft | email/campaign-send
memory/store | memory/retrieve | memory/purge
sre/health-check | sre/deploy | sre/restart | sre/logs

Respond with valid JSON only - no markdown, no explanation outside JSON:
{"intent":"domain/action","confidence":75,"reason":"brief reason"}

confidence is 0-100. Use <80 if you are not sure."""


def build_user_message(message: str, context: str | None = None) -> str:
    if context:
        return f"Context: {context}\n\nMessage: {message}"
    return f"Message: {message}"
