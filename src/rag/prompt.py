def build_analysis_prompt(company_name, affect, stock_symbol=None):
    company = f"{company_name} ({stock_symbol})" if stock_symbol else company_name

    return f"""You are a business analyst examining how external factors affect company performance.

Based on the business knowledge and retrieved information, provide an analysis of how {affect} impacts {company}'s business performance and operations.
Please format the content in markdown format.
Please structure your response as follows:
1. Brief overview of the relationship between {affect} and {company}
2. Key impacts identified from the data
3. Notable examples or specific instances (if available)
4. Summary of the overall effect"""
