"""
System prompt assembly.
"""

from ragent.infrastructure.vector_index import SearchResult

NO_CONTEXT_TEXT = "No relevant context found in knowledge base."

SYSTEM_PROMPT_TEMPLATE = """You are an intelligent AI assistant with access to a knowledge base and various tools.

## Core Instructions:
- Provide helpful, accurate, and conversational responses
- Use the provided context and plugin results to enhance your answers
- Maintain a professional yet friendly tone
- If you don't know something, admit it rather than making assumptions
- Be concise but comprehensive in your responses

## Available Capabilities:
{capabilities}

## Conversation Context:
{memory}

## Retrieved Knowledge Base Context:
{context}

## Plugin Execution Results:
{plugins}

## Guidelines:
1. If plugin results are available, incorporate them naturally into your response
2. Use the knowledge base context to provide more detailed and accurate information
3. Reference previous conversation when relevant
4. If asked about weather or math calculations, the plugin results will provide current data
5. Always be helpful and try to fully address the user's question

Please provide a helpful response based on all the available information above."""


def format_context(results: list[SearchResult]) -> str:
    """Render retrieved chunks, numbered from 1, with their source file and title."""
    if not results:
        return NO_CONTEXT_TEXT

    parts = ["Relevant information from knowledge base:"]
    for index, result in enumerate(results, start=1):
        chunk = result.chunk
        header = f"Context {index} (from {chunk.source_file}):"
        if chunk.metadata.title:
            header += f' "{chunk.metadata.title}"'
        parts.append(f"{header}\n{chunk.content}")
    return "\n\n".join(parts)


def build_system_prompt(capabilities: str, memory: str, context: str, plugins: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(
        capabilities=capabilities,
        memory=memory,
        context=context,
        plugins=plugins or "No plugins were triggered for this message.",
    )
