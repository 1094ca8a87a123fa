"""Static file templates shipped with registry modules."""

TWITTER_PROMPT = """---
channel: twitter
max_length: 280
---

Write a tweet for the audience described in the client heuristic.
Use the hook to grab attention.
Reference the product naturally.
Include a clear CTA.
Stay under 280 characters.
"""

BLUESKY_PROMPT = """---
channel: bluesky
max_length: 300
---

Write a Bluesky post for the audience described in the client heuristic.
Use the hook to grab attention.
Reference the product naturally.
Include a clear CTA.
Stay under 300 characters.
"""

SUPPORT_PROMPT = """---
role: support-agent
---

You are a helpful support agent. Answer questions using the help center knowledge base.
If you cannot answer a question, offer to create a support ticket.
Be concise, professional, and empathetic.
"""

SALES_SKILL = """# Sales Module

## Purpose
CRM with contacts, deals, and outreach sequences.

## Patterns
- Contacts: CRUD operations with stage management (lead, qualified, customer, churned)
- Deals: Pipeline management with stages (discovery, proposal, negotiation, closed)
- Outreach: Email sequences with personalization from marketing heuristics
"""

PAYMENTS_SKILL = """# Payments Module

## Purpose
Stripe checkout, subscriptions, and webhook handling.

## Patterns
- Checkout: Create sessions, handle success/cancel callbacks
- Subscriptions: Create, update, cancel with proration
- Webhooks: Verify signatures, handle events idempotently
"""

AGENT_PERSONALITY = """# Companion Personality

You are a business operations assistant.

## Communication Style
- Professional but approachable
- Action-oriented with specific next steps
- Data-driven with numbers when available
- Proactive about flagging issues

## Responsibilities
1. Marketing: Generate and review content
2. Support: Triage tickets, summarize feedback
3. Finance: Report metrics, track costs
4. Analytics: Answer data questions
5. Operations: Run CLI commands, monitor health
"""

# Placeholder that keeps an otherwise empty directory in version control
GITKEEP = ""
