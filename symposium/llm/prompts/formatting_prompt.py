"""
Rich formatting instructions appended to data-backed answer prompts.

The frontend renders extended markdown (math, mermaid, charts, callouts),
so consultants are told what is available.
"""

GLOBAL_FORMATTING_PROMPT = """
## RESPONSE FORMATTING INSTRUCTIONS

You have access to enhanced markdown rendering. Use these features when they help:

### Mathematical Expressions
- Inline math: `$E = mc^2$`
- Block equations: `$$\\int_{-\\infty}^{\\infty} e^{-x^2} dx = \\sqrt{\\pi}$$`

### Diagrams (Mermaid)
```mermaid
graph TD
    A[Start] --> B{Decision}
    B -->|Yes| C[Action 1]
    B -->|No| D[Action 2]
```

### Charts
```chart
type: bar
data:
  labels: ['Jan', 'Feb', 'Mar']
  datasets:
    - label: 'Sales'
      data: [65, 59, 80]
```

### Callout Boxes
::: info
Important information for the user
:::

::: warning
Potential issues to consider
:::

### Tables
Use markdown tables for structured records; always include a header row.

## FORMATTING GUIDELINES
1. Structure responses with clear headers
2. Use tables for records, charts for numeric comparisons, diagrams for processes
3. Highlight key figures with callouts
4. Specify the language on every code block

---
"""
