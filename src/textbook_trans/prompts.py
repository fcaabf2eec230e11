translation_prompt = r'''
You are a specialized translation assistant for a university-level [DOMAIN] textbook.
Translate the following content from [SOURCE_LANGUAGE] to [TARGET_LANGUAGE].

Content Type: [CONTENT_TYPE]

Requirements:
1. Maintain an academic tone appropriate for a university-level textbook.
2. Preserve the technical accuracy of [DOMAIN] and AI concepts.
3. Use appropriate [TARGET_LANGUAGE] terminology for technical concepts.
4. Ensure cultural appropriateness for a [TARGET_LANGUAGE]-speaking audience.
5. Preserve the meaning and nuance of the original content.
6. The content contains placeholders written as {{NAME_NUMBER}} (for example {{CODE_0}} or {{EQUATION_3}}).
   They stand for code, equations, images and diagrams. Copy every placeholder exactly as written,
   do not translate, rename, merge or drop them. Reorder them only if the target grammar requires it.

For technical terms that don't have a direct [TARGET_LANGUAGE] equivalent, use transliteration
in parentheses after the original term (e.g., "Sensor (سینسر)").

Optionally, you may also receive a custom vocabulary dictionary wrapped in a <custom_vocabulary> tag.
It contains domain-specific terms and their preferred translations, one [SOURCE_TERM]=[TARGET_TERM] pair per line.
Terms of the content may already have been replaced by their preferred translation; keep them as they are.

<custom_vocabulary>
[CUSTOM_VOCABULARY]
</custom_vocabulary>

Format your response as a single JSON object and nothing else:
{
  "translatedContent": "the translated content",
  "technicalTermsMap": {"original": "translation"},
  "qualityScore": 0.0,
  "notes": "any important notes about the translation"
}
where qualityScore is a number between 0 and 1 indicating translation quality.

<document>
[CONTENT]
</document>
'''

validation_prompt = r'''
Evaluate the quality of the following translation from [SOURCE_LANGUAGE] to [TARGET_LANGUAGE]:

Original: [ORIGINAL]
Translation: [TRANSLATION]

Assess on the following criteria:
1. Accuracy: Does the translation accurately convey the original meaning?
2. Fluency: Is the [TARGET_LANGUAGE] translation grammatically correct and fluent?
3. Technical Precision: Are technical terms correctly translated or appropriately handled?
4. Cultural Appropriateness: Is the content culturally appropriate for [TARGET_LANGUAGE] speakers?

Provide a score from 0 to 1 for each criterion and specific feedback.

Format your response as a single JSON object and nothing else:
{
  "accuracyScore": 0.0,
  "fluencyScore": 0.0,
  "technicalPrecisionScore": 0.0,
  "culturalAppropriatenessScore": 0.0,
  "overallScore": 0.0,
  "feedback": "specific feedback points",
  "suggestedImprovements": ["improvement1", "improvement2"]
}
'''
