"""
Canned user-facing texts. None of them may echo internal error details.
"""
from core.config import settings

REFINEMENT_TIPS = """• Time periods (e.g., "last 6 months", "2024")
• What data you want (e.g., "top 3 products per distributor")
• Any specific filters or criteria"""

SYNTAX_TIPS = """• **Break it down**: ask in parts instead of one complex question
• **Be specific**: "top 3 products per distributor" is clearer than "best products"
• **Use clear grouping**: "for each distributor" or "per distributor"
• **Specify ranking**: "by sales amount" or "by quantity\""""

EXAMPLE_QUESTIONS = """• "Show me the top 10 distributors by sales in the last 6 months"
• "What are the top 3 best-selling products for each of the top 10 distributors?"
• "Show me year-over-year sales growth for the past 3 years\""""


def suggestion_message(suggested_question: str, syntax_related: bool = False) -> str:
    tips = SYNTAX_TIPS if syntax_related else REFINEMENT_TIPS
    return f"""I want to make sure I understand your question correctly! 🤔

**Did you mean to ask:**
> "{suggested_question}"

You can simply reply with **"yes"** and I'll fetch that data for you right away!

If that's not quite what you're looking for, feel free to rephrase with more details like:
{tips}"""


def clarification_message() -> str:
    return f"""I'm having a bit of trouble understanding exactly what you're looking for. 😊

**Could you help me by being more specific?** For example:
{REFINEMENT_TIPS}

**Here are some example questions that work well:**
{EXAMPLE_QUESTIONS}"""


SYNTAX_ERROR = f"""I couldn't turn that question into a query I can run. 🔧

Questions with several rankings or groupings at once are the usual cause. Try:
{SYNTAX_TIPS}

**Here are some example questions that work well:**
{EXAMPLE_QUESTIONS}"""


REJECTION = f"""No problem! Could you please rephrase your question with more specific details? For example:

{REFINEMENT_TIPS}

I'm here to help once you provide more details!"""

EMPTY_RESULT = """I couldn't find any data matching your query. This could be because:

• **No records exist** for the specified criteria (time period, product, distributor, etc.)
• **The search terms don't match** any data in the database
• **The time period** you mentioned is outside the available data range

**Try:**
• Using a different time period
• Checking if product/distributor names are spelled correctly
• Being less specific to see what data is available"""

DATABASE_ERROR = f"""I couldn't find the data you're looking for. 😕

This might be because:
• The data doesn't exist for the criteria you specified
• The time period might be outside our available data range
• There might be a temporary issue

**Example questions that usually work:**
{EXAMPLE_QUESTIONS}"""

TIMEOUT = """⏱️ **Request Timeout**

The language model took too long to respond. This usually happens when the model server is slow or overloaded.

**Try:**
• Waiting a moment and asking again
• Simplifying your question"""

GENERIC_ERROR = """I encountered an unexpected error while processing your request. Please try again in a moment.

If the problem persists, try rephrasing your question or breaking it into smaller parts."""

EMPTY_QUESTION = "Your question cannot be empty. Please ask something about your business data."

CONVERSATIONAL_FALLBACK = "I'm here to help! Feel free to ask me any questions about your sales, distributors, or products."

METADATA_FALLBACK = (
    "I used data from our sales database. Could you clarify what specific information "
    "you'd like to know about the data source?"
)


def who_are_you() -> str:
    return f"""I'm the **{settings.COMPANY_NAME} Data Analysis Assistant**! 👋

I can answer questions about:

📊 **Sales** - Primary and secondary sales, revenue trends, growth analysis
🏭 **Distributors** - Performance, rankings, regional analysis
📦 **Products** - Best sellers, product comparisons
📈 **Business Metrics** - Year-over-year growth, monthly trends

Just ask in natural language, like "Show me top 10 distributors by sales".

How can I help you analyze your business data today?"""


def capabilities() -> str:
    return f"""I can help you with various business analytics! Here's what I can do:

📊 **Sales Analysis** - totals by period, year-over-year growth, month-wise breakdowns
🏭 **Distributor Insights** - top performers, rankings, regional performance
📦 **Product Analytics** - best sellers, category performance, product comparisons

**Just ask me in natural language!** For example:
{EXAMPLE_QUESTIONS}"""


SOURCE_DESCRIPTIONS = {
    "primary": "**Primary Sales** (FACT_SALES_ORDER) - orders directly to distributors from your company.",
    "secondary": "**Secondary Sales** (FACT_SECONDARY_SALES) - market sales from distributors to end customers.",
}

OTHER_SOURCE = {"primary": "secondary", "secondary": "primary"}


def source_confirmation(table: str, asked: str) -> str:
    """Reply when the user names primary/secondary for the data just shown."""
    other = OTHER_SOURCE[table]
    if asked == table:
        return f"""Yes, the data I just showed you was from {SOURCE_DESCRIPTIONS[table]}

If you'd like to see **{other.title()} Sales** data instead, just ask!"""
    return f"""No, the data I just showed you was from {SOURCE_DESCRIPTIONS[table]}

Would you like me to show you **{other.title()} Sales** data instead? {SOURCE_DESCRIPTIONS[other]}"""


def source_description(table: str) -> str:
    other = OTHER_SOURCE[table]
    return f"""The data I just showed you was from {SOURCE_DESCRIPTIONS[table]}

If you'd like to compare with **{other.title()} Sales**, I can fetch that data for you."""
