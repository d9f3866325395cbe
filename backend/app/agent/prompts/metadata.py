METADATA_PROMPT_TEMPLATE = """
Generate metadata for an AI-generated character image. Respond with ONLY valid JSON, no markdown formatting or code blocks.

Character: {character_id}
Prompt: {prompt}
Style: {style}
Variation: {variation}

Return JSON with these exact fields:
{{
  "title": "compelling descriptive title (max 60 chars)",
  "description": "detailed artistic description (100-150 words)",
  "tags": ["array", "of", "8-12", "relevant", "tags"]
}}

Title: engaging, describes pose/expression/action
Description: artistic, visual elements, mood, character traits
Tags: character name, style, pose, emotions, colors, themes

IMPORTANT: Return only the JSON object, no other text or formatting.
"""
