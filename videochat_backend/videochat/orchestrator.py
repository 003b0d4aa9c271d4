import logging
from typing import List, Optional
from langchain_core.runnables import RunnableConfig
from langgraph.graph import StateGraph, END
from pydantic import BaseModel, Field
from .api_client import ApiError, VideoChatClient
from .messages import MessageLog, PlanMetadata, ProgressMetadata
from .models import AssemblyPlan, MediaAnalysis, ScriptAnalysis

logger = logging.getLogger(__name__)

class SynthesisState(BaseModel):
    project_id: Optional[str] = None
    project_title: Optional[str] = None
    script_text: Optional[str] = None
    file_names: List[str] = Field(default_factory=list)
    script_analysis: Optional[ScriptAnalysis] = None
    media_analyses: List[MediaAnalysis] = Field(default_factory=list)
    assembly_plan: Optional[AssemblyPlan] = None
    storyboard_description: Optional[str] = None
    error: Optional[str] = None

def _deps(config: RunnableConfig):
    configurable = config["configurable"]
    return configurable["api"], configurable["log"]

def _fail(log: MessageLog, what: str, e: ApiError) -> dict:
    logger.error(f"Synthesis failed while {what}: {e.message} (status {e.status_code})")
    log.add("error", f"❌ Something went wrong while {what}: {e.message}")
    return {"error": e.message}

async def node_ensure_project(state: SynthesisState, config: RunnableConfig) -> dict:
    api, log = _deps(config)
    if state.project_id:
        logger.info(f"Reusing project {state.project_id}")
        return {"project_id": state.project_id}
    try:
        project = await api.create_project(title=state.project_title)
    except ApiError as e:
        return _fail(log, "creating your project", e)
    logger.info(f"Created project {project.id} for synthesis")
    return {"project_id": project.id}

async def node_analyze_script(state: SynthesisState, config: RunnableConfig) -> dict:
    api, log = _deps(config)
    if not state.script_text:
        logger.info("No script captured, skipping script analysis")
        return {"script_analysis": None}
    log.add("progress", "📝 Analyzing your script...", ProgressMetadata(marker="analyze-script"))
    try:
        analysis = await api.analyze_script(state.project_id, state.script_text)
    except ApiError as e:
        return _fail(log, "analyzing your script", e)
    log.update_progress("analyze-script", 100)
    log.add("success", f"✅ Script analyzed ({analysis.mood} mood, about {analysis.suggested_timing:g}s): {analysis.script_summary}")
    return {"script_analysis": analysis}

async def node_analyze_media(state: SynthesisState, config: RunnableConfig) -> dict:
    api, log = _deps(config)
    if not state.file_names:
        logger.info("No files uploaded, skipping media analysis")
        return {"media_analyses": []}
    count = len(state.file_names)
    log.add("progress", f"🎞️ Analyzing {count} media file{'s' if count != 1 else ''}...", ProgressMetadata(marker="analyze-media"))
    try:
        analyses = await api.analyze_media(state.project_id, state.file_names)
    except ApiError as e:
        return _fail(log, "analyzing your media", e)
    log.update_progress("analyze-media", 100)
    log.add("success", f"✅ Analyzed {len(analyses)} of {count} media files.")
    return {"media_analyses": analyses}

async def node_assembly_plan(state: SynthesisState, config: RunnableConfig) -> dict:
    api, log = _deps(config)
    log.add("progress", "🧩 Building your assembly plan...", ProgressMetadata(marker="assembly-plan"))
    try:
        result = await api.create_assembly_plan(state.project_id)
    except ApiError as e:
        return _fail(log, "building your assembly plan", e)
    log.update_progress("assembly-plan", 100)
    plan = result["assembly_plan"]
    log.add(
        "success",
        f"🎬 Your storyboard is ready! {len(plan.scenes)} scenes, {plan.total_duration:g}s total, {plan.pacing} pacing.",
        PlanMetadata(assembly_plan=plan, storyboard_description=result["storyboard_description"]),
    )
    return {"assembly_plan": plan, "storyboard_description": result["storyboard_description"]}

def _unless_failed(next_node: str):
    def route(state: SynthesisState) -> str:
        return END if state.error else next_node
    return route

def build_graph():
    g = StateGraph(SynthesisState)
    g.add_node("ensure_project", node_ensure_project)
    g.add_node("analyze_script", node_analyze_script)
    g.add_node("analyze_media", node_analyze_media)
    g.add_node("assembly_plan", node_assembly_plan)
    g.set_entry_point("ensure_project")
    g.add_conditional_edges("ensure_project", _unless_failed("analyze_script"), ["analyze_script", END])
    g.add_conditional_edges("analyze_script", _unless_failed("analyze_media"), ["analyze_media", END])
    g.add_conditional_edges("analyze_media", _unless_failed("assembly_plan"), ["assembly_plan", END])
    g.add_edge("assembly_plan", END)
    return g.compile()

GRAPH = build_graph()

async def run_pipeline(state: SynthesisState, api: VideoChatClient, log: MessageLog) -> SynthesisState:
    """Run the synthesis steps in order, stopping at the first failure.

    Progress, success and error messages are appended to `log` as each step
    runs. The returned state has `error` set when a step failed and
    `assembly_plan` set when every step succeeded.
    """
    logger.info(f"Starting synthesis pipeline (project={state.project_id}, files={len(state.file_names)})")
    final_state = await GRAPH.ainvoke(state, config={"configurable": {"api": api, "log": log}})
    # LangGraph hands back a dict of channel values
    if isinstance(final_state, SynthesisState):
        return final_state
    return SynthesisState.model_validate(dict(final_state))
