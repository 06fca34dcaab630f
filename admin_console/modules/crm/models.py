# Supabase tables: crm_customers, crm_deals
# This file documents the expected database schema
# Actual operations are handled via the RecordStore gateway in service.py

"""
Expected Supabase table structure:

crm_customers:
- id: uuid (primary key)
- name: text (not null)
- status: text - only 'ativo' customers can receive new deals
- email: text (nullable)
- phone: text (nullable)
- created_at: timestamp (default: now())

crm_deals:
- id: uuid (primary key)
- customer_id: uuid (not null, references crm_customers.id) - set once at creation
- title: text (not null)
- value: numeric (default: 0)
- status: text (default: 'prospeccao') - prospeccao | qualificado | proposta |
  negociacao | fechado_ganho | fechado_perdido
- expected_close_date: date (nullable)
- notes: text (nullable)
- created_at: timestamp
- updated_at: timestamp

Deals are read with the customer embedded:
  select("*, crm_customers:customer_id(name, email, phone)")
"""
