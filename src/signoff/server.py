"""MCP server exposing the signoff tools over stdio."""

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from signoff import __version__
from signoff.config import SignoffConfig
from signoff.session import Session
from signoff.tools import dispatch

logger = logging.getLogger(__name__)

SERVER_NAME = "signoff-flow"

SERVER_INSTRUCTIONS = """\
Signoff workflow for planning artifacts.

Select a project, configure governance (BA, Design and Dev leads), create an
initiative, then call signoff_advance once per stage: prd, ux, architecture,
epics_stories, readiness. Each advance writes a stub artifact and names the
groups that must approve it. Every tool returns a payload with `kind` and `ok`.
"""


def create_server(session: Session | None = None) -> FastMCP:
    """Create the MCP server with all tools bound to one session."""
    session = session or Session(SignoffConfig.from_env())
    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)

    @mcp.tool()
    def signoff_list_projects() -> dict[str, Any]:
        """List local project checkouts and whether each has governance configured."""
        return dispatch(session, "signoff_list_projects")

    @mcp.tool()
    def signoff_select_project(project: str) -> dict[str, Any]:
        """Select a project to work with.

        Args:
            project: Folder name under the projects directory, or an absolute path.
        """
        return dispatch(session, "signoff_select_project", {"project": project})

    @mcp.tool()
    def signoff_status(initiative_key: str | None = None) -> dict[str, Any]:
        """Report governance status, or the stage of one initiative.

        Args:
            initiative_key: Optional initiative to report on.
        """
        return dispatch(session, "signoff_status", {"initiative_key": initiative_key})

    @mcp.tool()
    def signoff_setup_governance(
        ba_leads: list[str],
        design_leads: list[str],
        dev_leads: list[str],
        jira_project_key: str,
    ) -> dict[str, Any]:
        """Record the BA, Design and Dev leads. Required before creating initiatives."""
        return dispatch(
            session,
            "signoff_setup_governance",
            {
                "ba_leads": ba_leads,
                "design_leads": design_leads,
                "dev_leads": dev_leads,
                "jira_project_key": jira_project_key,
            },
        )

    @mcp.tool()
    def signoff_new_initiative(key: str, title: str) -> dict[str, Any]:
        """Create a new initiative at the first stage. Governance must be set up first."""
        return dispatch(session, "signoff_new_initiative", {"key": key, "title": title})

    @mcp.tool()
    def signoff_advance(key: str) -> dict[str, Any]:
        """Write the current stage's artifact and move the initiative to the next stage."""
        return dispatch(session, "signoff_advance", {"key": key})

    @mcp.tool()
    def signoff_create_jira_tickets(key: str, artifact: str, pr_url: str | None = None) -> dict[str, Any]:
        """Describe the sign-off tickets to open for one artifact, one per required group."""
        return dispatch(
            session,
            "signoff_create_jira_tickets",
            {"key": key, "artifact": artifact, "pr_url": pr_url},
        )

    logger.debug("registered signoff tools (version %s)", __version__)
    return mcp


def run_server(session: Session | None = None) -> None:
    """Serve over stdio until the client disconnects."""
    server = create_server(session)
    logger.info("starting %s over stdio", SERVER_NAME)
    server.run(transport="stdio")
