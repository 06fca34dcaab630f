# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via the RecordStore gateway in service.py
# Rows are created by the member registration flow, never deleted by the console

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- email: text (not null)
- full_name: text (nullable)
- whatsapp: text (nullable) - null when the member gave none, never ''
- payment_status: text (not null, default: 'pendente') - 'pendente' | 'aprovado'
- is_admin: boolean (not null, default: false)
- created_at: timestamp (default: now())
"""
