ENHANCEMENT_PROMPT_TEMPLATE = """
Enhance this character description for high-quality {style} image generation.

Base prompt: {base_prompt}
Characters: {characters}
Style: {style}

Create a detailed, specific prompt that will generate high-quality character images while maintaining
the distinctive features and personality of each character. Include details about poses, expressions,
lighting, and artistic style. Keep it under 200 words.
"""
