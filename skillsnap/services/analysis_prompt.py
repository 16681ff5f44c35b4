SYSTEM_PROMPT = (
    "You are an applicant tracking system and career coach for software engineering, data science, "
    "data analytics and big data roles. You compare a resume with a job description and answer with "
    "one complete, valid JSON object and nothing else: no markdown, no commentary."
)

_RESPONSE_SHAPE = """{
  "extractedJobTitle": "",
  "similarityPercentage": 0,
  "matchPercent": 0,
  "atsScore": 0,
  "atsScoreExplanation": "",
  "skillsFound": [],
  "missingSkills": [],
  "strengthAreas": [],
  "improvementAreas": [],
  "suggestions": {
    "resumeImprovements": [],
    "alternativeBulletPoints": [],
    "atsOptimizedSummary": ""
  },
  "phasedRoadmap": [
    {
      "skill": "Name of one missing skill",
      "skillsCovered": ["Name of one missing skill"],
      "phases": [
        {
          "phase": "Fundamentals",
          "goal": "",
          "duration": "1-2 weeks",
          "learningResources": {
            "courses": [{"title": "", "url": "https://..."}],
            "youtube": [{"title": "", "url": "https://..."}],
            "documentation": [{"title": "", "url": "https://..."}],
            "projects": [{"title": "", "url": "https://..."}]
          }
        }
      ]
    }
  ]
}"""

_RULES = """Rules:
1. Return every field of the structure below; phasedRoadmap is a non-empty array.
2. extractedJobTitle is the role named or implied by the job description.
3. similarityPercentage is the semantic similarity of resume and job description, matchPercent the keyword match,
   atsScore the overall ATS compatibility; all three are numbers from 0 to 100. atsScoreExplanation justifies atsScore briefly.
4. skillsFound lists job description skills present in the resume. missingSkills lists only technical hard skills
   (languages, frameworks, tools, platforms, databases, technical concepts) required by the job description and absent
   from the resume; never soft skills.
5. Every missing skill gets its own phasedRoadmap entry with Fundamentals, Intermediate and Advanced phases. Only tightly
   coupled standards (for example HTML and CSS) may share an entry. If missingSkills is empty, build entries that
   strengthen the three most critical technical skills of the job description.
6. Every missing skill is also mentioned in suggestions.resumeImprovements with a concrete tip on where to add it.
7. Every learning resource has a real, public HTTPS URL from official documentation or well-known platforms.
   Never use placeholders such as "#" or example.com."""


def build_analysis_prompt(resume_text: str, jd_text: str) -> str:
    return (
        f"{_RULES}\n\n"
        f"Response structure:\n{_RESPONSE_SHAPE}\n\n"
        f"RESUME:\n{resume_text.strip()}\n\n"
        f"JOB DESCRIPTION:\n{jd_text.strip()}\n"
    )
