"""The standard query validation rules, grouped by what they check."""