"""Module registry.

Static catalog of every installable module, its files and the modules it
depends on. The registry is a hand-authored DAG; a dependency cycle would be
a bug in this file, but resolution still terminates if one slips in.

A module requires another in two ways: by name through ``dependencies``, or
through a peer package in ``peer_dependencies`` that a registered module
ships. Peer packages no registered module ships (such as the AI SDK) are
left to the package manager and do not affect resolution.
"""

from collections.abc import Mapping
from types import MappingProxyType

from vibectl.models.module import (
    ConfigEntry,
    ModuleCategory,
    ModuleDescriptor,
    ModuleFile,
    RouteRegistration,
)
from vibectl.modules import templates

AI_PACKAGE = "@vibeonrails/ai"

_MODULES: dict[str, ModuleDescriptor] = {
    "marketing": ModuleDescriptor(
        name="marketing",
        package="@vibeonrails/marketing",
        description="Content pipeline: heuristics, AI generation, channel posting",
        category=ModuleCategory.OPS,
        peer_dependencies=(AI_PACKAGE,),
        files=(
            ModuleFile(
                "content/marketing/heuristics/.gitkeep",
                templates.GITKEEP,
                "Heuristics directory",
            ),
            ModuleFile(
                "content/marketing/transform/prompts/twitter.md",
                templates.TWITTER_PROMPT,
                "Twitter channel prompt",
            ),
            ModuleFile(
                "content/marketing/transform/prompts/bluesky.md",
                templates.BLUESKY_PROMPT,
                "Bluesky channel prompt",
            ),
            ModuleFile(
                "content/marketing/channels/twitter/drafts/.gitkeep",
                templates.GITKEEP,
                "Twitter drafts directory",
            ),
            ModuleFile(
                "content/marketing/channels/twitter/posted/.gitkeep",
                templates.GITKEEP,
                "Twitter posted directory",
            ),
            ModuleFile(
                "content/marketing/channels/bluesky/drafts/.gitkeep",
                templates.GITKEEP,
                "Bluesky drafts directory",
            ),
            ModuleFile(
                "content/marketing/channels/bluesky/posted/.gitkeep",
                templates.GITKEEP,
                "Bluesky posted directory",
            ),
        ),
        config_entries=(
            ConfigEntry(
                "marketing.channels",
                "['twitter', 'bluesky']",
                "Enabled marketing channels",
            ),
        ),
        content_dirs=("content/marketing",),
        post_install_steps=(
            "Create heuristics: npx vibe marketing heuristics create hook my-first-hook",
            "Connect Twitter: npx vibe connect twitter",
            "Generate content: npx vibe marketing generate twitter",
        ),
    ),
    "sales": ModuleDescriptor(
        name="sales",
        package="@vibeonrails/sales",
        description="CRM with contacts, deals, and outreach sequences",
        category=ModuleCategory.OPS,
        files=(
            ModuleFile(
                "src/modules/sales/SKILL.md",
                templates.SALES_SKILL,
                "Sales module skill file",
            ),
        ),
        routes=(RouteRegistration("/api/sales", "@vibeonrails/sales"),),
        post_install_steps=(
            'Add contacts: npx vibe sales contacts add --name "..." --email "..."',
            "Import contacts: npx vibe sales contacts import contacts.csv",
        ),
    ),
    "support-chat": ModuleDescriptor(
        name="support-chat",
        package="@vibeonrails/support-chat",
        description="AI-powered support chat widget with SSE streaming",
        category=ModuleCategory.OPS,
        peer_dependencies=(AI_PACKAGE,),
        files=(
            ModuleFile(
                "content/brand/support-prompt.md",
                templates.SUPPORT_PROMPT,
                "Support AI prompt configuration",
            ),
        ),
        routes=(RouteRegistration("/api/support/chat", "@vibeonrails/support-chat"),),
        content_dirs=("content/brand",),
        post_install_steps=(
            "Edit support prompt: content/brand/support-prompt.md",
            'Add widget to your app: import { SupportChat } from "@vibeonrails/support-chat"',
        ),
    ),
    "support-feedback": ModuleDescriptor(
        name="support-feedback",
        package="@vibeonrails/support-feedback",
        description="User feedback pipeline: collect, classify, create tasks",
        category=ModuleCategory.OPS,
        files=(
            ModuleFile("content/feedback/.gitkeep", templates.GITKEEP, "Feedback directory"),
            ModuleFile(".plan/tasks/backlog/.gitkeep", templates.GITKEEP, "Task backlog directory"),
        ),
        routes=(RouteRegistration("/api/feedback", "@vibeonrails/support-feedback"),),
        content_dirs=("content/feedback", ".plan/tasks/backlog"),
        post_install_steps=("View feedback: npx vibe support feedback summary --last 7d",),
    ),
    "finance": ModuleDescriptor(
        name="finance",
        package="@vibeonrails/finance",
        description="Financial reporting: MRR, churn, LTV, invoicing",
        category=ModuleCategory.OPS,
        # Revenue metrics are read from the Stripe data payments sets up
        dependencies=("payments",),
        config_entries=(
            ConfigEntry(
                "finance.stripeKey",
                "process.env.STRIPE_SECRET_KEY ?? ''",
                "Stripe API key for revenue metrics",
            ),
        ),
        post_install_steps=(
            "Connect Stripe: npx vibe connect stripe",
            "Check MRR: npx vibe finance mrr",
        ),
    ),
    "notifications": ModuleDescriptor(
        name="notifications",
        package="@vibeonrails/notifications",
        description="Multi-channel notifications: email, in-app, push, Discord",
        category=ModuleCategory.OPS,
        post_install_steps=("Configure channels in vibe.config.ts",),
    ),
    "payments": ModuleDescriptor(
        name="payments",
        package="@vibeonrails/payments",
        description="Stripe checkout, subscriptions, and webhooks",
        category=ModuleCategory.FEATURES,
        files=(
            ModuleFile(
                "src/modules/payments/SKILL.md",
                templates.PAYMENTS_SKILL,
                "Payments module skill file",
            ),
        ),
        routes=(RouteRegistration("/api/payments", "@vibeonrails/payments"),),
        post_install_steps=("Set STRIPE_SECRET_KEY in .env", "Set STRIPE_WEBHOOK_SECRET in .env"),
    ),
    "admin": ModuleDescriptor(
        name="admin",
        package="@vibeonrails/admin",
        description="Auto-generated CRUD admin panel",
        category=ModuleCategory.FEATURES,
        routes=(RouteRegistration("/admin", "@vibeonrails/admin"),),
        post_install_steps=("Access admin panel at /admin",),
    ),
    "companion": ModuleDescriptor(
        name="companion",
        package="@vibeonrails/companion",
        description="OpenClaw skills for autonomous business operations",
        category=ModuleCategory.OPS,
        # The agent operates the marketing, support and finance pipelines
        dependencies=("marketing", "support-chat", "finance"),
        files=(
            ModuleFile(
                "content/brand/agent.md",
                templates.AGENT_PERSONALITY,
                "Companion personality configuration",
            ),
        ),
        content_dirs=("content/brand",),
        post_install_steps=(
            "Setup companion: npx vibe companion setup discord",
            "Edit personality: content/brand/agent.md",
        ),
    ),
}

MODULE_REGISTRY: Mapping[str, ModuleDescriptor] = MappingProxyType(_MODULES)


def get_module(name: str) -> ModuleDescriptor | None:
    """Look up a module by name.

    Args:
        name: Module name.

    Returns:
        The module descriptor, or None if no such module exists.
    """
    return MODULE_REGISTRY.get(name)


def get_modules_by_category(category: ModuleCategory | str) -> list[ModuleDescriptor]:
    """Get all modules in a category, in registry order."""
    return [m for m in MODULE_REGISTRY.values() if m.category == category]


def list_modules() -> list[ModuleDescriptor]:
    """Get every registered module, in registry order."""
    return list(MODULE_REGISTRY.values())


def find_module_by_package(
    package: str,
    registry: Mapping[str, ModuleDescriptor] = MODULE_REGISTRY,
) -> ModuleDescriptor | None:
    """Get the registered module that ships a package, if any."""
    return next((m for m in registry.values() if m.package == package), None)


def resolve_dependencies(
    name: str,
    registry: Mapping[str, ModuleDescriptor] = MODULE_REGISTRY,
) -> list[str]:
    """Resolve the transitive dependency closure of a module.

    Performs a depth-first traversal and emits names in post-order, so each
    module appears after everything it depends on and the requested module
    comes last. Peer packages shipped by a registered module are visited
    before named dependencies. Every name appears once. Names missing from
    the registry are dropped.

    Args:
        name: Module to resolve.
        registry: Catalog to resolve against.

    Returns:
        Module names to install, dependencies first, including name itself.
        Empty if name is not a registered module.
    """
    visited: set[str] = set()
    ordered: list[str] = []

    def visit(current: str) -> None:
        if current in visited:
            return
        visited.add(current)

        module = registry.get(current)
        if module is None:
            return

        for peer in module.peer_dependencies:
            provider = find_module_by_package(peer, registry)
            if provider is not None:
                visit(provider.name)
        for dependency in module.dependencies:
            visit(dependency)
        ordered.append(current)

    visit(name)
    return ordered
