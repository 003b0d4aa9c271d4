SCRIPT_SYSTEM_PROMPT = """You are a video content analysis expert. Analyze the provided script and extract key information for video production.
Output ONLY valid JSON matching the provided schema."""

SCRIPT_SCHEMA = r"""{
  "scriptSummary": "<brief summary of the script content>",
  "mainThemes": ["<theme1>", "<theme2>", "<theme3>"],
  "suggestedTiming": <number_in_seconds>,
  "mood": "energetic|calm|professional|dramatic|educational",
  "visualElements": ["<element1>", "<element2>", "<element3>"]
}"""

SCRIPT_USER_TEMPLATE = """Script to analyze:
{script}

Schema:
{schema}

Return ONLY valid JSON for the schema above."""


MEDIA_SYSTEM_PROMPT = """You are a video editor reviewing raw footage and assets for a new edit.
Only the file name and media type are known. Describe how the file is likely to be used.
Output ONLY valid JSON matching the provided schema."""

MEDIA_SCHEMA = r"""{
  "type": "image|video|audio",
  "description": "<what the file most likely contains>",
  "suggestedUsage": "<how it fits into a video timeline>",
  "duration": <estimated seconds, or null for images>,
  "keyFrames": ["<notable moment>", "..."] or null
}"""

MEDIA_USER_TEMPLATE = """File name: {file_name}
Media type: {media_type}

Schema:
{schema}

Return ONLY valid JSON for the schema above."""


PLAN_SYSTEM_PROMPT = """You are a video assembly expert. Create a detailed production plan for combining script content with available media.
Output ONLY valid JSON matching the provided schema."""

PLAN_SCHEMA = r"""{
  "totalDuration": <number_in_seconds>,
  "scenes": [
    {
      "sceneNumber": 1,
      "duration": <number_in_seconds>,
      "description": "<what happens in this scene>",
      "mediaFiles": ["<filename1>", "<filename2>"],
      "audioOverlay": "<audio filename or null>",
      "textOverlay": "<text to display or null>",
      "transitions": "<transition effect description>"
    }
  ],
  "audioTrack": "<main audio filename>",
  "pacing": "slow|medium|fast",
  "style": "<description of overall video style>"
}"""

PLAN_USER_TEMPLATE = """Script Analysis:
{script_analysis}

Available Media:
{media_analyses}

Schema:
{schema}

Create a comprehensive assembly plan that combines these elements into a cohesive video.
Only reference media files listed above. Return ONLY valid JSON for the schema above."""


STORYBOARD_PROMPT_TEMPLATE = """Based on this video assembly plan, create a detailed storyboard description that explains the visual flow and timing:

{assembly_plan}

Provide a narrative description of how the video will look and flow from scene to scene."""
