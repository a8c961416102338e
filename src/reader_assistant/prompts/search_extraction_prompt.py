from langchain_core.prompts import PromptTemplate

template = """Given this image and the user's question, generate 1-3 web search queries that would help provide a more informed answer. Return ONLY a JSON array of search query strings, nothing else.

User's question: {question}

Example response format: ["search query 1", "search query 2"]"""

prompt = PromptTemplate.from_template(template)
