"""
Feedly integration: the subscription list from an OPML export.

The OPML document is pasted into the settings page, so this pipeline makes
no HTTP calls.
"""
from dashboard.integrations.config_provider import get_section, require
from dashboard.integrations.pipeline import PipelineContext, PipelineDefinition
from dashboard.integrations.transforms import opml_to_outline
from dashboard.models.enums import IntegrationName
from dashboard.models.snapshot import FeedlySnapshot


async def read_settings(context: PipelineContext) -> PipelineContext:
    section = get_section(context.config, IntegrationName.FEEDLY)
    return context.with_data(opml=require(section.opml, "Missing Feedly opml config"))


async def parse_feeds(context: PipelineContext) -> PipelineContext:
    return context.with_data(feeds=opml_to_outline(context.get("opml")))


def build_snapshot(context: PipelineContext) -> FeedlySnapshot:
    return FeedlySnapshot(feeds=context.get("feeds"))


PIPELINE = PipelineDefinition(
    name=IntegrationName.FEEDLY,
    stages=(read_settings, parse_feeds),
    build_snapshot=build_snapshot,
)
