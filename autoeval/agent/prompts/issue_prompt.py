from langchain_core.messages import SystemMessage, HumanMessage  # type: ignore

from autoeval.models.vehicle import VehicleQuery


def build_issue_prompt(vehicle: VehicleQuery, issue: str):
    return [
        SystemMessage(
            content=(
                "Act as a senior master mechanic.\n\n"
                "Provide a technical deep-dive on the specific issue the user names.\n"
                "Include:\n"
                "1. Root Cause Analysis (Technical explanation)\n"
                "2. Typical Symptoms to look for\n"
                "3. Repair Strategy (Summary of steps & parts often required)\n"
                "4. DIY Feasibility (Easy/Medium/Hard) and special tools needed\n\n"

                "Rules:\n"
                "- Format with clear Markdown headers\n"
                "- Keep it concise but helpful\n"
                "- Stay on the named issue for the named vehicle\n"
            )
        ),
        HumanMessage(
            content=(
                f"Vehicle: {vehicle.label}\n"
                f"Problem: {issue}"
            )
        ),
    ]
