import os, json, logging
from typing import List, Optional
from pydantic import ValidationError
from .models import AssemblyPlan, MediaAnalysis, MediaType, ScriptAnalysis
from .prompts import (
    SCRIPT_SYSTEM_PROMPT, SCRIPT_USER_TEMPLATE, SCRIPT_SCHEMA,
    MEDIA_SYSTEM_PROMPT, MEDIA_USER_TEMPLATE, MEDIA_SCHEMA,
    PLAN_SYSTEM_PROMPT, PLAN_USER_TEMPLATE, PLAN_SCHEMA,
    STORYBOARD_PROMPT_TEMPLATE,
)
from . import settings

logger = logging.getLogger(__name__)

EMPTY_RESPONSE = "Empty response from model"

class SynthesisError(RuntimeError):
    """The AI provider failed or returned something that does not match the expected schema"""

class SynthesisClient:
    """Talks to an OpenAI-compatible chat completions API (Gemini by default).

    The underlying SDK client is created on first use so the server can start
    without credentials; calls made without a key fail with SynthesisError.
    """

    def __init__(self, client=None, model: Optional[str] = None, fast_model: Optional[str] = None):
        self._client = client
        self.model = model or settings.AI_MODEL
        self.fast_model = fast_model or settings.AI_FAST_MODEL

    def _get_client(self):
        if self._client is None:
            from openai import OpenAI
            api_key = os.getenv("GEMINI_API_KEY", settings.GEMINI_API_KEY)
            if not api_key:
                raise SynthesisError("GEMINI_API_KEY is not set; please configure your .env")
            self._client = OpenAI(
                api_key=api_key,
                base_url=settings.AI_BASE_URL,
                timeout=settings.AI_REQUEST_TIMEOUT_S,
            )
        return self._client

    def _complete(self, messages: List[dict], model: str, json_mode: bool) -> str:
        kwargs = {"model": model, "messages": messages, "temperature": settings.AI_TEMPERATURE}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        resp = self._get_client().chat.completions.create(**kwargs)
        content = resp.choices[0].message.content if resp.choices else None
        if not content or not content.strip():
            raise SynthesisError(EMPTY_RESPONSE)
        return content

    def _complete_json(self, system_prompt: str, user_prompt: str, model: str) -> dict:
        content = self._complete(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            model=model,
            json_mode=True,
        )
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise SynthesisError(f"Model returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise SynthesisError("Model returned JSON that is not an object")
        return data

    def analyze_script(self, script_content: str) -> ScriptAnalysis:
        logger.info(f"Analyzing script ({len(script_content)} chars) with {self.model}")
        try:
            raw = self._complete_json(
                SCRIPT_SYSTEM_PROMPT,
                SCRIPT_USER_TEMPLATE.format(script=script_content, schema=SCRIPT_SCHEMA),
                self.model,
            )
            return ScriptAnalysis.model_validate(raw)
        except SynthesisError:
            raise
        except ValidationError as e:
            raise SynthesisError(f"Failed to analyze script: {e}") from e
        except Exception as e:
            logger.error(f"Script analysis call failed: {str(e)}")
            raise SynthesisError(f"Failed to analyze script: {e}") from e

    def analyze_media(self, file_name: str, media_type: MediaType) -> MediaAnalysis:
        logger.info(f"Analyzing {media_type} file: {file_name}")
        try:
            raw = self._complete_json(
                MEDIA_SYSTEM_PROMPT,
                MEDIA_USER_TEMPLATE.format(file_name=file_name, media_type=media_type, schema=MEDIA_SCHEMA),
                self.model,
            )
            # The file name and type are facts we already know; the model only fills in the rest.
            raw["type"] = media_type
            raw["fileName"] = file_name
            return MediaAnalysis.model_validate(raw)
        except SynthesisError:
            raise
        except ValidationError as e:
            raise SynthesisError(f"Failed to analyze {media_type}: {e}") from e
        except Exception as e:
            logger.error(f"Media analysis call failed for {file_name}: {str(e)}")
            raise SynthesisError(f"Failed to analyze {media_type}: {e}") from e

    def create_assembly_plan(self, script_analysis: ScriptAnalysis, media_analyses: List[MediaAnalysis]) -> AssemblyPlan:
        logger.info(f"Creating assembly plan from {len(media_analyses)} media analyses")
        user_prompt = PLAN_USER_TEMPLATE.format(
            script_analysis=script_analysis.model_dump_json(by_alias=True),
            media_analyses=json.dumps([m.model_dump(by_alias=True, exclude_none=True) for m in media_analyses]),
            schema=PLAN_SCHEMA,
        )
        try:
            raw = self._complete_json(PLAN_SYSTEM_PROMPT, user_prompt, self.model)
            return AssemblyPlan.model_validate(raw)
        except SynthesisError:
            raise
        except ValidationError as e:
            raise SynthesisError(f"Failed to create assembly plan: {e}") from e
        except Exception as e:
            logger.error(f"Assembly plan call failed: {str(e)}")
            raise SynthesisError(f"Failed to create assembly plan: {e}") from e

    def generate_storyboard_description(self, assembly_plan: AssemblyPlan) -> str:
        prompt = STORYBOARD_PROMPT_TEMPLATE.format(
            assembly_plan=assembly_plan.model_dump_json(by_alias=True, indent=2)
        )
        try:
            return self._complete([{"role": "user", "content": prompt}], model=self.fast_model, json_mode=False)
        except SynthesisError as e:
            if str(e) == EMPTY_RESPONSE:
                return "Storyboard description not available"
            raise
        except Exception as e:
            logger.error(f"Storyboard description call failed: {str(e)}")
            raise SynthesisError(f"Failed to generate storyboard description: {e}") from e
